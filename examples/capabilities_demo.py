#!/usr/bin/env python3
"""
Capabilities Demo -- chuk-mcp-terrain

Quick-start script showing what the server can do, without any tiles on
disk. Uses the synthetic terrain surface to look up heights and slopes at
a few named Norwegian landmarks, and demonstrates the dual output mode
(JSON vs text).

Usage:
    python examples/capabilities_demo.py
"""

import asyncio

from tool_runner import ToolRunner


async def main() -> None:
    runner = ToolRunner(mockup=True)

    print("=" * 60)
    print("chuk-mcp-terrain -- Server Capabilities (synthetic surface)")
    print("=" * 60)

    print(f"\nRegistered tools ({len(runner.tool_names)}):")
    for name in sorted(runner.tool_names):
        print(f"  - {name}")

    caps = await runner.run("terrain_capabilities")
    print("\nCapabilities:")
    print(f"  Resolutions: {', '.join(str(r) for r in caps['resolutions'])}")
    print(f"  Named locations: {caps['location_count']}")
    print(f"  Guidance: {caps['llm_guidance']}")

    locations = await runner.run("terrain_list_locations")
    print(f"\n{locations['message']}, first five:")
    for loc in locations["locations"][:5]:
        coord = await runner.run("terrain_describe_coordinate", coordinate=loc["name"])
        print(f"  {loc['name']:24s} {coord['coordinate']:24s} lat {coord['lat']:.4f} lon {coord['lon']:.4f}")

    print("\nSynthetic heights and slopes:")
    for name in ["Galdhøpiggen", "Store Skagastølstind", "Snøhetta"]:
        grad = await runner.run("terrain_lookup_gradient", coordinate=name)
        if "error" in grad:
            print(f"  {name}: {grad['error']}")
            continue
        print(
            f"  {name:22s} {grad['height_m']:7.1f}m  slope {grad['slope_degrees']:5.2f}  "
            f"aspect {grad['aspect_degrees']:5.1f}"
        )

    # ---------------------------------------------------------------
    # Dual output mode: text vs JSON
    # ---------------------------------------------------------------
    print("\n" + "-" * 60)
    print("Dual Output Mode Demo")
    print("-" * 60)

    print("\nterrain_status (output_mode='text'):")
    print(await runner.run_text("terrain_status"))

    print("\nterrain_lookup_height (output_mode='text'):")
    print(await runner.run_text("terrain_lookup_height", coordinate="N6851889E146005"))

    print("\nterrain_lookup_height with a bad coordinate:")
    print(await runner.run_text("terrain_lookup_height", coordinate="Atlantis"))


if __name__ == "__main__":
    asyncio.run(main())
