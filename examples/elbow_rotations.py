#!/usr/bin/env python3
"""
Print the four quadrant outlines of a 6" elbow.

The outer arc always carries sweep flag 0 and the inner arc sweep flag 1;
only the points rotate.
"""

from pypelayout.geometry import NOMINAL_PIPE_DIAMETERS, make_elbow_outline


def main():
    diameter = NOMINAL_PIPE_DIAMETERS["6"]
    for rotation in range(4):
        outline = make_elbow_outline((0.0, 0.0), diameter, rotation)
        print(f"rotation {rotation} ({rotation * 90}°) sweeps={outline.sweep_flags()}")
        print(f"  {outline.to_svg_path()}")
    return 0


if __name__ == "__main__":
    import sys
    sys.exit(main())
