"""Mass Budget Example for cherries.

This example traces a satellite mass budget:
- pint quantities as payloads, so every node carries its unit
- per-component margins applied with operators
- an n-ary fold for the total
- validation against the launch vehicle limit, reporting every violated rule

Prerequisites:
    This example requires pint. Install it with:
        uv pip install pint
"""

import pint
from rich.console import Console

import cherries as ch

ureg = pint.UnitRegistry()
console = Console()

# -----------------------------------------------------------------------------
# Inputs
# -----------------------------------------------------------------------------

# Current Best Estimate (CBE) and growth margin per component
COMPONENTS = {
    "structure": (12.0, 0.10),
    "battery": (3.5, 0.05),
    "solar_panel": (4.2, 0.20),
}

MASS_LIMIT = ureg.Quantity(22.0, "kilogram")


# -----------------------------------------------------------------------------
# Calculations
# -----------------------------------------------------------------------------


def component_mass(name: str, cbe: float, margin: float) -> ch.Node:
    """Mass of one component with its growth margin applied."""
    mass = ch.leaf(ureg.Quantity(cbe, "kilogram"), f"{name}.mass")
    factor = ch.leaf(1.0, "one") + ch.leaf(margin, f"{name}.margin")
    return (mass * factor).labeled(f"{name}.mass_with_margin")


def total_mass() -> ch.Node:
    """Sum of all component masses with margin."""
    return ch.sum_all(*(component_mass(name, cbe, margin) for name, (cbe, margin) in COMPONENTS.items())).labeled(
        "total_mass",
    )


# -----------------------------------------------------------------------------
# Verification
# -----------------------------------------------------------------------------


def verify_total_mass(total: ch.Node) -> ch.ValidationResult:
    """Check the total against the launch vehicle constraints."""
    return (
        total.validate("must not exceed launch vehicle limit", lambda m: m <= MASS_LIMIT)
        .validate("must be positive", lambda m: m.magnitude > 0)
        .into_result()
    )


def main() -> None:
    total = total_mass()
    ch.render_tree(total, console)

    result = verify_total_mass(total)
    if result.ok:
        console.print("[green]✓ Mass budget verified[/green]")
    else:
        console.print(f"[red]✗ {result.failure}[/red]")

    console.print_json(total.to_json())


if __name__ == "__main__":
    main()
