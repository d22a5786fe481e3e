"""
Estimate data validated at the boundary.

Estimate data is an opaque JSON document edited by the UI. Rather than
probing it at every use site, EstimateInputs.from_data() reads every input
the quote builder understands once, from a list of accepted aliases, and
degrades anything missing or malformed to a default. It never raises.

The classify_* functions turn free-text fields into tagged variants.
"""
import re
from enum import Enum
from typing import Any, Iterable, List, Mapping, Optional, Union

from pydantic import BaseModel


class StarterKind(str, Enum):
    DOL = "dol"
    STAR_DELTA = "yd"
    SOFT = "soft"
    VFD = "vfd"


class ValveModel(str, Enum):
    DOUBLE_FLANGE = "Double-flange"
    SEMI_LUG = "Semi-lug"
    LUG = "Lug"
    WAFER = "Wafer"
    MONO = "Mono-flange"
    GENERIC = "Valve"


class Actuation(str, Enum):
    PNEUMATIC = "pneumatic"
    ELECTRIC = "electric"


class ActingMode(str, Enum):
    SINGLE = "single"
    DOUBLE = "double"


class ItemGroup(str, Enum):
    PUMP = "pump"
    VALVE = "valve"
    STARTER = "starter"
    LEVEL_SWITCH = "level_switch"
    OTHER = "other"


Number = Union[int, float]

PUMP_MODELS = {
    "RBP-250": "ah_pump_rbp_250",
    "RBP-300": "ah_pump_rbp_300",
    "RBP-400": "ah_pump_rbp_400",
}


def _norm(text: Any) -> str:
    return str(text or "").upper()


def _compact(text: Any) -> str:
    return re.sub(r"[^A-Z0-9]", "", _norm(text))


def classify_starter(text: Any) -> StarterKind:
    s = _norm(text)
    if "VFD" in s or "FREQUENCY" in s or "VSD" in s:
        return StarterKind.VFD
    if "SOFT" in s:
        return StarterKind.SOFT
    if "DELTA" in s or re.search(r"STAR(?!T)", s) or re.search(r"(^|[^A-Z])Y([^A-Z]|D\b|$)", s):
        return StarterKind.STAR_DELTA
    return StarterKind.DOL


def classify_valve_model(text: Any) -> ValveModel:
    s = re.sub(r"[\s_\-]+", " ", _norm(text))
    compact = s.replace(" ", "")
    if "DOUBLEFLANGE" in compact or "DOUBLEFLANGED" in compact:
        return ValveModel.DOUBLE_FLANGE
    if "SEMILUG" in compact:
        return ValveModel.SEMI_LUG
    if "LUG" in compact:
        return ValveModel.LUG
    if "WAFER" in compact:
        return ValveModel.WAFER
    if "MONO" in compact:
        return ValveModel.MONO
    return ValveModel.GENERIC


def classify_acting_mode(text: Any) -> ActingMode:
    # "double-flange" names a valve body, not an acting mode
    s = re.sub(r"DOUBLE[\s_\-]*FLANGED?", "", _norm(text))
    if "DOUBLE" in s or re.search(r"(^|[^A-Z])DA([^A-Z]|$)", s):
        return ActingMode.DOUBLE
    return ActingMode.SINGLE


def classify_actuation(text: Any) -> Actuation:
    s = _norm(text)
    if "ELECTR" in s or "MOTOR" in s:
        return Actuation.ELECTRIC
    return Actuation.PNEUMATIC


def match_pump_model(text: Any) -> Optional[str]:
    """Return the known model code contained in text (RBP-250, ...), if any."""
    compact = _compact(text)
    if not compact:
        return None
    for code in PUMP_MODELS:
        if _compact(code) in compact:
            return code
    return None


# ---------------------------------------------------------------------------
# coercion helpers
# ---------------------------------------------------------------------------

def _dig(data: Any, paths: Iterable[str]) -> Any:
    """First non-empty value found at any of the dotted paths."""
    for path in paths:
        node = data
        for part in path.split("."):
            if isinstance(node, Mapping) and part in node:
                node = node[part]
            else:
                node = None
                break
        if node is not None and node != "":
            return node
    return None


# "1,200" groups thousands; "2,5" is a decimal comma
_GROUPED = re.compile(r"-?\d{1,3}(?:,\d{3})+(?:\.\d+)?")
_NUMBER = re.compile(r"-?\d{1,3}(?:,\d{3})+(?:\.\d+)?(?!\d)|-?\d+(?:[.,]\d+)?")


def _num(value: Any) -> Optional[float]:
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return float(value)
    if isinstance(value, str):
        match = _NUMBER.search(value)
        if match:
            token = match.group(0)
            if _GROUPED.fullmatch(token):
                return float(token.replace(",", ""))
            return float(token.replace(",", "."))
    return None


def _qty(value: Any) -> Optional[float]:
    n = _num(value)
    if n is None:
        return None
    n = max(n, 0.0)
    return int(n) if float(n).is_integer() else n


def _text(value: Any) -> Optional[str]:
    if value is None or isinstance(value, (dict, list)):
        return None
    text = str(value).strip()
    return text or None


def _flag_qty(value: Any) -> float:
    """True/"yes" -> 1, numbers -> themselves, anything else -> 0."""
    if isinstance(value, bool):
        return 1 if value else 0
    if isinstance(value, str) and value.strip().lower() in ("yes", "true", "y", "included"):
        return 1
    return _qty(value) or 0


def _flag(value: Any) -> bool:
    return _flag_qty(value) > 0


class EstimateLineItem(BaseModel):
    group: ItemGroup = ItemGroup.OTHER
    category: Optional[str] = None
    model: Optional[str] = None
    description: Optional[str] = None
    actuation: Actuation = Actuation.PNEUMATIC
    acting_mode: ActingMode = ActingMode.SINGLE
    quantity: Optional[Number] = None

    @property
    def valve_model(self) -> ValveModel:
        return classify_valve_model(self.model or self.description)


def classify_line_item(category: Optional[str], model: Optional[str], description: Optional[str]) -> ItemGroup:
    for text in (category, " ".join(filter(None, [model, description]))):
        s = _norm(text)
        if not s:
            continue
        if "VALVE" in s:
            return ItemGroup.VALVE
        if "STARTER" in s:
            return ItemGroup.STARTER
        if "LEVEL" in s:
            return ItemGroup.LEVEL_SWITCH
        if "PUMP" in s:
            return ItemGroup.PUMP
    return ItemGroup.OTHER


def _line_item(raw: Any, default_group: ItemGroup = ItemGroup.OTHER) -> Optional[EstimateLineItem]:
    if not isinstance(raw, Mapping):
        return None
    category = _text(_dig(raw, ["category", "kind", "group", "type"]))
    model = _text(_dig(raw, ["model", "valveModel", "valveType", "name"]))
    description = _text(_dig(raw, ["description", "label"]))
    actuation_text = _text(_dig(raw, ["actuation", "actuator", "actuatorType"]))
    acting_text = _text(_dig(raw, ["actingMode", "acting_mode", "acting", "action"]))

    group = classify_line_item(category, model, description)
    if group == ItemGroup.OTHER:
        # only valves carry an actuator
        group = ItemGroup.VALVE if (actuation_text or acting_text) else default_group
    if actuation_text is None:
        actuation_text = " ".join(filter(None, [category, model, description]))

    return EstimateLineItem(
        group=group,
        category=category,
        model=model,
        description=description,
        actuation=classify_actuation(actuation_text),
        acting_mode=classify_acting_mode(acting_text or description),
        quantity=_qty(_dig(raw, ["quantity", "qty", "count"])),
    )


class EstimateInputs(BaseModel):
    """Every estimate input the quote builder reads, with its default."""

    # Pump
    pump_model: Optional[str] = None
    pump_quantity: Optional[Number] = None
    capacity: Optional[Number] = None
    head: Optional[Number] = None
    motor_rating: Optional[Number] = None
    motor_variant: Optional[str] = None
    enclosure: str = "IP55"
    supply_voltage: str = "440 V/60 Hz/3-ph"
    counter_flanges: bool = False
    manometer: bool = False

    # Control system
    control_quantity: Optional[Number] = None
    operating_mode: str = "Automatically or manually operated"
    screen_size: str = "7"
    mounting: str = "desk- or cabinet-wall"
    interface: str = "ModBus RS-485"
    slave_panels: Number = 0

    # Starter
    starter_type: Optional[str] = None
    starter_quantity: Optional[Number] = None

    # Instrumentation and extras
    level_switch_quantity: Optional[Number] = None
    local_switch_panels: Number = 0
    pressure_monitoring: Number = 0
    spare_parts: bool = False

    # Class certification
    class_society: Optional[str] = None
    class_bracket: Optional[str] = None
    class_notation: Optional[str] = None

    # Commissioning
    extra_support_days: Number = 0
    support_personnel: Number = 1

    line_items: List[EstimateLineItem] = []

    @classmethod
    def from_data(cls, data: Any) -> "EstimateInputs":
        if not isinstance(data, Mapping):
            data = {}

        def text(*paths):
            return _text(_dig(data, paths))

        def num(*paths):
            return _num(_dig(data, paths))

        def qty(*paths):
            return _qty(_dig(data, paths))

        raw_items = _dig(data, ["lineItems", "line_items", "items"])
        items = [_line_item(r) for r in raw_items] if isinstance(raw_items, list) else []
        raw_valves = _dig(data, ["valves"])
        if isinstance(raw_valves, list):
            items += [_line_item(r, ItemGroup.VALVE) for r in raw_valves]

        values = dict(
            pump_model=text("pumpModel", "pumpType", "pump.model", "pump.type", "pump_model", "pump_type"),
            pump_quantity=qty("pumpQuantity", "pumpQty", "pump.quantity", "pump.qty", "pump_quantity"),
            capacity=num("capacity", "pump.capacity", "flow.capacity", "flowCapacity"),
            head=num("head", "pump.head", "flow.head", "flowHead"),
            motor_rating=num("motorRating", "motor.rating", "motorPower", "motor_rating", "power", "flow.power"),
            motor_variant=text("motorVariant", "motor.variant", "motorType", "motor.type", "motor_variant"),
            enclosure=text("enclosure", "motor.enclosure", "ipRating"),
            supply_voltage=text("supplyVoltage", "voltage", "motor.voltage", "supply_voltage"),
            counter_flanges=_flag(_dig(data, ["counterFlanges", "flanges", "pump.flanges", "counter_flanges"])),
            manometer=_flag(_dig(data, ["manometer", "manometers", "pump.manometer"])),
            control_quantity=qty("controlSystem.quantity", "controlSystem.qty", "control_system.quantity", "controlQuantity"),
            operating_mode=text("controlSystem.operatingMode", "controlSystem.mode", "operatingMode", "control_system.operating_mode"),
            screen_size=text("controlSystem.screenSize", "screenSize", "control_system.screen_size"),
            mounting=text("controlSystem.mounting", "mounting", "control_system.mounting"),
            interface=text("controlSystem.interface", "interface", "control_system.interface"),
            slave_panels=_flag_qty(_dig(data, ["controlSystem.slavePanels", "slavePanels", "remotePanels", "slavePanel"])),
            starter_type=text("starterType", "starter.type", "starter_type"),
            starter_quantity=qty("starterQuantity", "starter.quantity", "starter.qty", "starter_quantity"),
            level_switch_quantity=qty("levelSwitchQuantity", "levelSwitches", "level_switch_quantity"),
            local_switch_panels=_flag_qty(_dig(data, ["localSwitchPanels", "localSwitchPanel"])),
            pressure_monitoring=_flag_qty(_dig(data, ["pressureMonitoring", "pressureMonitor"])),
            spare_parts=_flag(_dig(data, ["spareParts", "spare_parts"])),
            class_society=text("classSociety", "class.society", "classification.society", "class_society"),
            class_bracket=text("classBracket", "class.bracket", "classification.bracket", "class_bracket"),
            class_notation=text("classNotation", "class.notation", "classification.notation", "class_notation"),
            extra_support_days=qty("extraSupportDays", "commissioning.extraDays", "extraDays", "extra_support_days"),
            support_personnel=qty("supportPersonnel", "commissioning.personnel", "commissioning.engineers", "support_personnel"),
            line_items=[i for i in items if i is not None],
        )
        # Unset entries keep the model defaults
        return cls(**{k: v for k, v in values.items() if v is not None})

    def items_in(self, group: ItemGroup) -> List[EstimateLineItem]:
        return [i for i in self.line_items if i.group == group]

    def quantity_in(self, group: ItemGroup) -> Optional[Number]:
        """Summed explicit quantities of a group; None when no item states one."""
        given = [i.quantity for i in self.items_in(group) if i.quantity is not None]
        return sum(given) if given else None
