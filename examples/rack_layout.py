#!/usr/bin/env python3
"""
Build a small pipe rack layout and export it to SVG.

Two racks carry a horizontal run; a vertical drop hangs off an elbow at the
end. Progress is recorded on the finished pieces.
"""

import logging
from pathlib import Path

from pypelayout import LayoutEditor, setup_logging, write_svg


def build_layout() -> LayoutEditor:
    editor = LayoutEditor()

    # Two racks, the second aligned to the first one's base line
    rack_a = editor.add("support", center=(300, 300))
    rack_b = editor.add("support", center=(640, 320))
    editor.move(rack_b.id, (0, -6))

    # Drop the run onto the racks
    run = editor.add("pipe", center=(470, 240), length=400)
    editor.move(run.id, (0, 30))

    elbow = editor.add("elbow", center=(run.center[0] + 200 + 30, run.center[1]))
    editor.move(elbow.id, (0, 2))
    editor.rotate(elbow.id)

    drop = editor.add("pipe", center=(elbow.center[0] + 30, elbow.center[1] + 130), length=200)
    editor.rotate(drop.id)

    editor.select([rack_a.id, rack_b.id])
    editor.mark_complete(date="2024-06-03")
    editor.select([run.id])
    editor.update_stage("welding", "IN_PROGRESS")
    editor.set_joint_state(0, "COMPLETED")

    editor.select([rack_a.id, rack_b.id, run.id, elbow.id, drop.id])
    zone = editor.create_zone()
    editor.set_label(zone.id, "Area 200 - Rack erection")
    editor.set_note(zone.id, "Crane access from north road")
    return editor


def main():
    setup_logging(logging.INFO)
    output_dir = Path(__file__).parent / "output"
    output_dir.mkdir(exist_ok=True)

    editor = build_layout()
    svg_path = write_svg(editor.entities(), output_dir / "rack_layout.svg")

    for entity in editor.entities():
        x, y = entity.center
        print(f"{entity.id:<10} ({x:7.1f}, {y:7.1f})  {entity.label}")

    lifting = editor.progress_summary("lifting")
    print(f"\nLifting complete: {lifting.completed_fraction:.0%}")
    print(f"Exported SVG: {svg_path}")
    return 0


if __name__ == "__main__":
    import sys
    sys.exit(main())
