from scambait.intel.extractor import populated_categories


def build_agent_notes(intel: dict, keywords) -> str:
    # Short behavioral summary: which indicators fired and what was collected
    parts = []
    if keywords:
        parts.append("Signals: " + "; ".join(list(keywords)[:4]))
    found = [f"{k}={len(intel[k])}" for k in populated_categories(intel)]
    if found:
        parts.append("Collected: " + ", ".join(found))
    return " | ".join(parts)
