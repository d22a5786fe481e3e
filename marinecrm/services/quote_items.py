"""
Quote item builder.

Maps a project and its estimate data onto the ordered bill of materials of
an anti-heeling quote. Pure: no I/O and no hidden state, so identical
inputs always give identical item lists. Missing or malformed estimate
fields degrade to defaults; nothing here raises for bad estimate data.
"""
from typing import Any, Iterable, List, Mapping, Optional, Union

from marinecrm.schemas.quote import ProjectSnapshot, QuoteItem
from marinecrm.services.estimate_inputs import (
    PUMP_MODELS,
    ActingMode,
    Actuation,
    EstimateInputs,
    EstimateLineItem,
    ItemGroup,
    StarterKind,
    classify_starter,
    match_pump_model,
)
from marinecrm.services.template_filler import TemplateFiller, format_value

BASE_SUPPORT_DAYS = 3

STARTER_FALLBACKS = {
    StarterKind.DOL: "Direct-On-Line (DOL) starter panel for the pump motor, complete with contactors, "
                     "overload relays, ammeter and emergency stop.",
    StarterKind.STAR_DELTA: "Star-Delta (Y/D) starter cabinet for reduced inrush current, complete with "
                            "contactors, timer relay, over-current protection and emergency stop.",
    StarterKind.SOFT: "Soft-starter panel for controlled ramp-up and ramp-down of the pump motor, with "
                      "overload protection, bypass contactor and emergency stop.",
    StarterKind.VFD: "Variable Frequency Drive (VFD) for full speed control of the pump motor, with "
                     "soft-start/stop, filter and overload protection.",
}

VALVE_FAMILY_LABELS = {
    Actuation.PNEUMATIC: "Pneumatic",
    Actuation.ELECTRIC: "Electric-actuated",
}

VALVE_TEMPLATE_KEYS = {
    (Actuation.PNEUMATIC, ActingMode.SINGLE): "ah_valve_pne_single",
    (Actuation.PNEUMATIC, ActingMode.DOUBLE): "ah_valve_pne_double",
    (Actuation.ELECTRIC, ActingMode.SINGLE): "ah_valve_electric_single",
    (Actuation.ELECTRIC, ActingMode.DOUBLE): "ah_valve_electric_double",
}

VALVE_FALLBACKS = {
    (Actuation.PNEUMATIC, ActingMode.SINGLE): "Pneumatic butterfly valve, single-acting, complete with "
                                              "solenoid valve and limit switches",
    (Actuation.PNEUMATIC, ActingMode.DOUBLE): "Pneumatic butterfly valve, double-acting, complete with "
                                              "solenoid valve and limit switches",
    (Actuation.ELECTRIC, ActingMode.SINGLE): "Electric-actuated butterfly valve, single-acting, with manual "
                                             "override and limit switches",
    (Actuation.ELECTRIC, ActingMode.DOUBLE): "Electric-actuated butterfly valve, double-acting, with manual "
                                             "override and limit switches",
}


def _qty(value: Union[int, float]) -> Union[int, float]:
    return int(value) if float(value).is_integer() else value


def _first(*values: Any) -> Any:
    """None-coalescing: first value that is not None."""
    for value in values:
        if value is not None:
            return value
    return None


def _is_ex_proof(variant: Optional[str]) -> bool:
    compact = "".join(ch for ch in (variant or "").upper() if ch.isalnum())
    return "EX" in compact and "NONEX" not in compact


# ---------------------------------------------------------------------------
# pump
# ---------------------------------------------------------------------------

def resolve_pump_quantity(project: ProjectSnapshot, inputs: EstimateInputs) -> Union[int, float]:
    return _qty(_first(inputs.quantity_in(ItemGroup.PUMP), inputs.pump_quantity, project.pumps_per_vessel, 1))


def _pump_description(project: ProjectSnapshot, inputs: EstimateInputs, filler: TemplateFiller,
                      qty: Union[int, float]) -> str:
    model = match_pump_model(inputs.pump_model)
    capacity = _first(inputs.capacity, project.flow_capacity)
    head = _first(inputs.head, project.flow_head)
    power = _first(inputs.motor_rating, project.flow_power)
    ex_proof = _is_ex_proof(inputs.motor_variant)
    motor_type = "explosion-proof (Ex d IIC T4)" if ex_proof else "Non-Ex TEFC"

    name = model or inputs.pump_model
    text = f"Reversible propeller pump {name}" if name else "Reversible propeller pump"
    duty = []
    if capacity is not None:
        duty.append(f"capacity {format_value(capacity)} m³/h")
    if head is not None:
        duty.append(f"@ {format_value(head)} mwc")
    if power is not None:
        duty.append(f"@ {format_value(power)} kW")
    if duty:
        text += ", " + " ".join(duty)
    text += (f", vertically coupled to {motor_type} electric motor, "
             f"{inputs.enclosure}, {inputs.supply_voltage}.")
    if inputs.counter_flanges:
        text += " Counter flanges, bolts and nuts included."
    if inputs.manometer:
        text += " Manometers on suction and discharge side included."

    if model:
        return filler.fill_or(PUMP_MODELS[model], {
            "model": model,
            "quantity": qty,
            "capacity": capacity,
            "head": head,
            "motor_rating": power,
            "motor_variant": inputs.motor_variant or motor_type,
            "enclosure": inputs.enclosure,
            "supply_voltage": inputs.supply_voltage,
        }, text)
    return text


# ---------------------------------------------------------------------------
# valves
# ---------------------------------------------------------------------------

def valve_breakdown(items: Iterable[EstimateLineItem]) -> str:
    """Quantities grouped by valve model in first-seen order: "2 x Lug, 1 x Wafer"."""
    counts = {}
    for item in items:
        label = item.valve_model.value
        counts[label] = counts.get(label, 0) + item.quantity
    return ", ".join(f"{format_value(_qty(q))} x {label}" for label, q in counts.items())


def _valve_items(inputs: EstimateInputs, filler: TemplateFiller) -> List[QuoteItem]:
    valves = [v for v in inputs.items_in(ItemGroup.VALVE) if (v.quantity or 0) > 0]
    out = []
    for actuation in (Actuation.PNEUMATIC, Actuation.ELECTRIC):
        family = [v for v in valves if v.actuation == actuation]
        single = [v for v in family if v.acting_mode == ActingMode.SINGLE]
        double = [v for v in family if v.acting_mode == ActingMode.DOUBLE]
        single_qty = _qty(sum(v.quantity for v in single))
        double_qty = _qty(sum(v.quantity for v in double))
        kind = f"valve_{actuation.value}"

        if single_qty > 0 and double_qty > 0:
            description = (
                f"{VALVE_FAMILY_LABELS[actuation]} butterfly valves: "
                f"{format_value(single_qty)} x single-acting ({valve_breakdown(single)}) and "
                f"{format_value(double_qty)} x double-acting ({valve_breakdown(double)})"
            )
            out.append(QuoteItem(kind=kind, qty=_qty(single_qty + double_qty), unit="pcs",
                                 description=description))
            continue

        for mode, group, qty in ((ActingMode.SINGLE, single, single_qty),
                                 (ActingMode.DOUBLE, double, double_qty)):
            if qty <= 0:
                continue
            breakdown = valve_breakdown(group)
            description = filler.fill_or(
                VALVE_TEMPLATE_KEYS[(actuation, mode)],
                {"quantity": qty, "breakdown": breakdown},
                VALVE_FALLBACKS[(actuation, mode)],
            )
            if breakdown:
                description = f"{description} ({breakdown})"
            out.append(QuoteItem(kind=kind, qty=qty, unit="pcs", description=description))
    return out


# ---------------------------------------------------------------------------
# builder
# ---------------------------------------------------------------------------

def build_items(project: Any, estimate_data: Any,
                templates: Optional[Union[Mapping[str, str], TemplateFiller]] = None) -> List[QuoteItem]:
    """
    Build the ordered quote line items for a project.

    Args:
        project: ProjectSnapshot, plain row (dict) or ORM Project
        estimate_data: raw estimate JSON (any shape) or EstimateInputs
        templates: product description templates (key -> template) or a TemplateFiller

    Returns:
        Line items, each with qty > 0 and a non-empty description
    """
    project = ProjectSnapshot.coerce(project)
    inputs = estimate_data if isinstance(estimate_data, EstimateInputs) else EstimateInputs.from_data(estimate_data)
    filler = templates if isinstance(templates, TemplateFiller) else TemplateFiller(templates)

    items: List[QuoteItem] = []

    # Pump
    pump_qty = resolve_pump_quantity(project, inputs)
    if pump_qty > 0:
        items.append(QuoteItem(
            kind="pump",
            qty=pump_qty,
            unit="pcs",
            description=_pump_description(project, inputs, filler, pump_qty),
            capacity=_first(inputs.capacity, project.flow_capacity),
            head=_first(inputs.head, project.flow_head),
        ))

    # Control system
    control_qty = _qty(_first(inputs.control_quantity, 1))
    if control_qty > 0:
        screen = inputs.screen_size.rstrip('"″ ')
        items.append(QuoteItem(
            kind="control_system",
            qty=control_qty,
            unit="pcs",
            description=(
                f"{inputs.operating_mode} control system (MCU) with {screen}″ touch screen, "
                f"{inputs.mounting} mounted. PLC with anti-heeling logic, manual override and "
                f"emergency stop; {inputs.interface} interface to vessel IAS."
            ),
        ))

    if inputs.slave_panels > 0:
        items.append(QuoteItem(
            kind="control_slave",
            qty=_qty(inputs.slave_panels),
            unit="pcs",
            description=filler.fill_or(
                "ah_control_slave", {},
                "Remote control panel with duplicate controls and display for operating the "
                "anti-heeling system from a second location.",
            ),
        ))

    # Starter
    starter_qty = _qty(_first(inputs.quantity_in(ItemGroup.STARTER), inputs.starter_quantity, pump_qty))
    if starter_qty > 0:
        starter_kind = classify_starter(inputs.starter_type)
        items.append(QuoteItem(
            kind="starter",
            qty=starter_qty,
            unit="pcs",
            description=filler.fill_or(
                f"ah_starter_{starter_kind.value}",
                {"motor_rating": _first(inputs.motor_rating, project.flow_power)},
                STARTER_FALLBACKS[starter_kind],
            ),
        ))

    if inputs.local_switch_panels > 0:
        items.append(QuoteItem(
            kind="local_switch_panel",
            qty=_qty(inputs.local_switch_panels),
            unit="pcs",
            description=filler.fill_or(
                "ah_local_switch_panel", {},
                "Local switch panel for the starter with start/stop push buttons, reset and status lamps.",
            ),
        ))

    # Valves
    items.extend(_valve_items(inputs, filler))

    # Level switches
    level_qty = _qty(_first(inputs.level_switch_quantity, inputs.quantity_in(ItemGroup.LEVEL_SWITCH), 0))
    if level_qty > 0:
        items.append(QuoteItem(
            kind="level_switch",
            qty=level_qty,
            unit="pcs",
            description=filler.fill_or(
                "ah_level_switch", {"quantity": level_qty},
                "High/low level switch for the heeling tanks, providing discrete signals to the "
                "control system for automatic shut-off and alarm.",
            ),
        ))

    if inputs.pressure_monitoring > 0:
        items.append(QuoteItem(
            kind="pressure_monitoring",
            qty=_qty(inputs.pressure_monitoring),
            unit="set",
            description=filler.fill_or(
                "ah_pressure_mon", {},
                "Pressure gauge and transmitter set for monitoring pump suction and discharge pressure.",
            ),
        ))

    if inputs.spare_parts:
        items.append(QuoteItem(
            kind="spare_parts",
            qty=1,
            unit="set",
            description=filler.fill_or(
                "ah_spare_parts", {},
                "Recommended spare parts for the anti-heeling pump(s) for one complete overhaul.",
            ),
        ))

    # Class certification
    if inputs.class_society:
        fallback = f"Class certification by {inputs.class_society}"
        if inputs.class_bracket:
            fallback += f", power bracket {inputs.class_bracket}"
        if inputs.class_notation:
            fallback += f", class notation {inputs.class_notation}"
        items.append(QuoteItem(
            kind="class_certification",
            qty=1,
            unit="lot",
            description=filler.fill_or(
                "ah_class_cert",
                {
                    "class_society": inputs.class_society,
                    "class_bracket": inputs.class_bracket,
                    "class_notation": inputs.class_notation,
                },
                fallback + ".",
            ),
        ))

    # Always present
    items.append(QuoteItem(
        kind="tools",
        qty=1,
        unit="set",
        description=filler.fill_or(
            "ah_tools_manuals", {},
            "Tools, service manuals and class-required certificates for the complete anti-heeling system.",
        ),
    ))

    support_days = _qty(BASE_SUPPORT_DAYS + (inputs.extra_support_days or 0))
    personnel = _qty(inputs.support_personnel or 1)
    items.append(QuoteItem(
        kind="startup",
        qty=1,
        unit="lot",
        description=filler.fill_or(
            "ah_commissioning",
            {"commission_days": support_days, "support_days": support_days,
             "support_personnel": personnel},
            f"Assistance at start-up and commissioning: {format_value(personnel)}-man service engineer "
            f"for {format_value(support_days)}-working days, supervising installation, functional "
            f"testing, class witness and crew training.",
        ),
    ))

    return items


def compute_total_price(project: Any, override: Optional[float] = None) -> Optional[float]:
    """Explicit override, else price per vessel x number of vessels (default 1)."""
    if override is not None:
        return override
    project = ProjectSnapshot.coerce(project)
    if project.price_per_vessel is None:
        return None
    vessels = project.number_of_vessels if project.number_of_vessels is not None else 1
    return project.price_per_vessel * vessels
