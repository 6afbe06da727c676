"""
Score a recorded transcript against a scenario without running the API.

    python scripts/score_transcript.py transcript.json bank_fraud
    python scripts/score_transcript.py transcript.json my_case --scenarios my_scenarios.json

The transcript is either a list of {sender, text, timestamp} messages or an
object with "conversation" (or "conversationHistory") and optional
"sessionId" / "agentNotes".
"""
import argparse
import json
import sys

from scambait.core.orchestrator import build_final_output, replay_conversation
from scambait.core.scenarios import ScenarioError, get_scenario, load_scenarios
from scambait.core.scoring import evaluate_final_output


def _read_transcript(path: str) -> dict:
    with open(path, "r", encoding="utf-8") as f:
        raw = json.load(f)
    if isinstance(raw, list):
        return {"conversation": raw}
    if not isinstance(raw, dict):
        raise ValueError(f"{path}: expected a list of messages or an object")
    return {
        "sessionId": raw.get("sessionId"),
        "conversation": raw.get("conversation") or raw.get("conversationHistory") or [],
        "agentNotes": raw.get("agentNotes"),
    }


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(description=__doc__.strip().splitlines()[0])
    parser.add_argument("transcript")
    parser.add_argument("scenario_id")
    parser.add_argument("--scenarios", help="scenario fixture file (defaults to the bundled set)")
    args = parser.parse_args(argv)

    try:
        transcript = _read_transcript(args.transcript)
        if args.scenarios:
            scenario = next((s for s in load_scenarios(args.scenarios) if s.scenarioId == args.scenario_id), None)
            if scenario is None:
                raise ScenarioError(f"unknown scenario {args.scenario_id!r}")
        else:
            scenario = get_scenario(args.scenario_id)
    except (OSError, ValueError) as e:
        print(f"error: {e}", file=sys.stderr)
        return 2

    session = replay_conversation(transcript.get("sessionId") or "offline", transcript["conversation"])
    final = build_final_output(session, transcript.get("agentNotes"))
    score = evaluate_final_output(final, scenario, session.conversation)

    print(json.dumps({"finalOutput": final.to_dict(), "score": score.to_dict()}, indent=2))
    return 0


if __name__ == "__main__":
    sys.exit(main())
