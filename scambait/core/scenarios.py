import json
import os
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

_FIXTURES = os.path.join(os.path.dirname(__file__), "fixtures", "scenarios.json")


class ScenarioError(ValueError):
    """A scenario fixture is missing required fields or has the wrong shape."""


@dataclass(frozen=True)
class Scenario:
    scenarioId: str
    name: str = ""
    description: str = ""
    scamType: str = ""
    initialMessage: str = ""
    metadata: Dict[str, Any] = field(default_factory=dict)
    weight: float = 1.0
    maxTurns: int = 10
    # planted key (bankAccount, upiId, ... or a category name) -> planted value
    fakeData: Dict[str, Optional[str]] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: dict) -> "Scenario":
        if not isinstance(data, dict):
            raise ScenarioError("scenario must be a JSON object")
        sid = data.get("scenarioId") or data.get("id")
        if not sid:
            raise ScenarioError("scenario is missing scenarioId")
        fake = data.get("fakeData") or {}
        if not isinstance(fake, dict):
            raise ScenarioError(f"scenario {sid}: fakeData must be an object")
        try:
            return cls(
                scenarioId=str(sid),
                name=str(data.get("name") or ""),
                description=str(data.get("description") or ""),
                scamType=str(data.get("scamType") or data.get("category") or ""),
                initialMessage=str(data.get("initialMessage") or ""),
                metadata=dict(data.get("metadata") or {}),
                weight=float(data.get("weight", 1.0)),
                maxTurns=int(data.get("maxTurns", 10)),
                fakeData={str(k): (None if v is None else str(v)) for k, v in fake.items()},
            )
        except (TypeError, ValueError) as e:
            raise ScenarioError(f"scenario {sid}: {e}") from e


def load_scenarios(path: str = _FIXTURES) -> List[Scenario]:
    with open(path, "r", encoding="utf-8") as f:
        raw = json.load(f)
    if isinstance(raw, dict):
        raw = raw.get("scenarios", [])
    if not isinstance(raw, list):
        raise ScenarioError(f"{path}: expected a list of scenarios")
    return [Scenario.from_dict(d) for d in raw]


def get_scenario(scenario_id: str, path: str = _FIXTURES) -> Scenario:
    for sc in load_scenarios(path):
        if sc.scenarioId == scenario_id:
            return sc
    raise ScenarioError(f"unknown scenario {scenario_id!r}")
