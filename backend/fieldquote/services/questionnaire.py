"""
questionnaire.py — Interview structure for service line items.

Each category is a short, ordered list of steps.  The quick-quote UI walks
the steps in order; the pricer only needs to know which answers are
required and how to label them.

Step types:
  choice  — one of a fixed set of option keys, non-blank once normalized
  number  — numeric input, non-blank (quantity)
  text    — free text, non-blank after trimming
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional, Tuple

STEP_CHOICE = "choice"
STEP_NUMBER = "number"
STEP_TEXT = "text"


def normalize_choice(value: Any) -> str:
    """Choice answer as an option key, "" when unanswered.  11.0 → "11"; booleans never answer a choice."""
    if value is None or isinstance(value, bool):
        return ""
    if isinstance(value, float) and value.is_integer():
        value = int(value)
    return str(value).strip()


@dataclass(frozen=True)
class Step:
    key: str
    type: str
    label: str
    options: Tuple[Tuple[str, str], ...] = ()
    required: bool = True

    def option_label(self, value: Any) -> Optional[str]:
        for opt_key, opt_label in self.options:
            if opt_key == str(value):
                return opt_label
        return None


@dataclass(frozen=True)
class CategoryDefinition:
    key: str
    label: str
    steps: Tuple[Step, ...] = field(default_factory=tuple)

    def step(self, key: str) -> Optional[Step]:
        for s in self.steps:
            if s.key == key:
                return s
        return None


_QUANTITY = Step("quantity", STEP_NUMBER, "Quantity")


def _simple(key: str, label: str, options: Tuple[Tuple[str, str], ...]) -> CategoryDefinition:
    return CategoryDefinition(key, label, (Step("type", STEP_CHOICE, "Type", options), _QUANTITY))


CATEGORIES: Tuple[CategoryDefinition, ...] = (
    CategoryDefinition("lighting", "Lighting", (
        Step("light_type", STEP_CHOICE, "Light type", (
            ("wall", "Wall light"),
            ("ceiling", "Ceiling light"),
            ("floor", "Floor light"),
            ("led_strip", "LED strip"),
            ("track", "Track system"),
            ("bollard", "Garden bollard"),
        )),
        Step("environment", STEP_CHOICE, "Environment", (("indoor", "Indoor"), ("outdoor", "Outdoor"))),
        Step("style", STEP_CHOICE, "Style", (("simple", "Simple"), ("modern", "Modern"), ("design", "Design"))),
        _QUANTITY,
    )),
    CategoryDefinition("sockets_switches", "Sockets/Switches", (
        Step("point_type", STEP_CHOICE, "Point type", (
            ("schuko_socket", "Socket outlet"),
            ("switch", "Switch"),
            ("dimmer", "Dimmer"),
        )),
        _QUANTITY,
    )),
    CategoryDefinition("wallbox", "Wallbox", (
        Step("power", STEP_CHOICE, "Power", (("11", "11 kW"), ("22", "22 kW"))),
        Step("connection_type", STEP_CHOICE, "Connection type", (
            ("socket", "Industrial socket"),
            ("standard", "Standard wallbox"),
            ("smart", "Smart wallbox"),
        )),
        Step("distance", STEP_CHOICE, "Distance from board", (
            ("0-5", "0-5 m"),
            ("5-10", "5-10 m"),
            ("10-25", "10-25 m"),
            ("25-50", "25-50 m"),
        )),
        _QUANTITY,
    )),
    _simple("telephony", "Telephony/Internet", (("rj45_outlet", "RJ45 outlet"), ("access_point", "Access point"))),
    _simple("surveillance", "Video surveillance", (("camera", "Camera"), ("video_intercom", "Video intercom"))),
    _simple("home_automation", "Home automation", (("relay_module", "Relay module"), ("automation_hub", "Automation hub"))),
    _simple("repairs", "Repairs", (("short_circuit", "Short-circuit fault"), ("line_restore", "Line restoration"))),
    CategoryDefinition("other", "Other", (
        Step("description", STEP_TEXT, "Describe the work"),
        _QUANTITY,
    )),
)

_BY_KEY: Dict[str, CategoryDefinition] = {c.key: c for c in CATEGORIES}


def get_category(key: str) -> Optional[CategoryDefinition]:
    return _BY_KEY.get(key)


def required_dimensions(category: str) -> List[str]:
    """Choice steps that must be answered before a line item can be priced."""
    definition = _BY_KEY.get(category)
    if definition is None:
        return []
    return [s.key for s in definition.steps if s.type == STEP_CHOICE and s.required]


def _answered(step: Step, value: Any) -> bool:
    if step.type == STEP_NUMBER:
        return value is not None and str(value).strip() != ""
    if step.type == STEP_TEXT:
        return isinstance(value, str) and value.strip() != ""
    return normalize_choice(value) != ""


def missing_steps(category: str, answers: Mapping[str, Any]) -> List[str]:
    """Step keys still unanswered, in interview order.  Unknown category → []."""
    definition = _BY_KEY.get(category)
    if definition is None:
        return []
    return [s.key for s in definition.steps if not _answered(s, answers.get(s.key))]


def is_complete(category: str, answers: Mapping[str, Any]) -> bool:
    """True when every step of a known category has an answer."""
    if category not in _BY_KEY:
        return False
    return not missing_steps(category, answers)


def choice_label(category: str, step_key: str, value: Any) -> str:
    """Display label for a choice answer, falling back to the raw value."""
    definition = _BY_KEY.get(category)
    step = definition.step(step_key) if definition else None
    label = step.option_label(value) if step else None
    return label or str(value)


def as_dict() -> List[Dict[str, Any]]:
    """JSON-friendly form of the interview tree for rendering collaborators."""
    return [
        {
            "key": c.key,
            "label": c.label,
            "steps": [
                {
                    "key": s.key,
                    "type": s.type,
                    "label": s.label,
                    "options": [{"key": k, "label": lbl} for k, lbl in s.options],
                }
                for s in c.steps
            ],
        }
        for c in CATEGORIES
    ]
