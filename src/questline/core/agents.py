"""Default agent definitions for the pipeline.

Defines the two-stage 510(k) review pipeline used when no agents are
configured.
"""

from __future__ import annotations

from ..models.agent import AgentDefinition
from ..models.provider import Provider

DEFAULT_AGENT_DEFS: list[dict] = [
    {
        "id": "analyst",
        "name": "Regulatory Analyst",
        "description": "Analyzes input for compliance gaps.",
        "provider": Provider.GEMINI,
        "model": "gemini-2.5-flash",
        "max_tokens": 4000,
        "temperature": 0.2,
        "system_prompt": (
            "You are an expert FDA regulatory analyst. Analyze the provided device "
            "description and identify potential predicate device gaps."
        ),
    },
    {
        "id": "writer",
        "name": "Submission Writer",
        "description": "Drafts the 510(k) summary.",
        "provider": Provider.OPENAI,
        "model": "gpt-4o-mini",
        "max_tokens": 6000,
        "temperature": 0.7,
        "system_prompt": (
            "You are a technical writer specializing in medical devices. Draft a "
            "clear, concise 510(k) summary based on the analysis."
        ),
    },
]


def default_agents() -> list[AgentDefinition]:
    """Return fresh copies of the default agents."""
    return [AgentDefinition.model_validate(d) for d in DEFAULT_AGENT_DEFS]


def load_agents(config: dict) -> list[AgentDefinition]:
    """Build agent definitions from the pipeline.agents config section.

    Falls back to the defaults when the section is empty.
    """
    configured = (config.get("pipeline") or {}).get("agents") or []
    if not configured:
        return default_agents()
    return [AgentDefinition.model_validate(d) for d in configured]


FOLLOW_UP_QUESTIONS: list[str] = [
    "How does the chosen predicate device compare in terms of material safety?",
    "Are there any biocompatibility standards that need specific attention?",
    "What specific software verification tests are recommended?",
    "Does the device require clinical data or just bench testing?",
    "How should the sterilization validation be documented?",
    "What are the labeling requirements for this specific classification?",
    "Are there any cybersecurity concerns for this device?",
    "How does the risk management file align with ISO 14971?",
    "What is the substantial equivalence argument structure?",
    "Are there recent guidance documents relevant to this device type?",
    "How should human factors engineering be addressed?",
    "What specific shelf-life testing protocols are needed?",
    "Does the device contain any animal-derived materials?",
    "How are electromagnetic compatibility (EMC) risks mitigated?",
    "What are the specific packaging validation requirements?",
    "Is a pre-submission meeting with the FDA recommended?",
    "How should post-market surveillance be planned?",
    "Are there any unique device identification (UDI) requirements?",
    "How to address differences in technological characteristics?",
    "What statistical methods are appropriate for the non-clinical data?",
]


def load_follow_up_questions(config: dict) -> list[str]:
    """Follow-up questions from pipeline.follow_up_questions, else the defaults."""
    configured = (config.get("pipeline") or {}).get("follow_up_questions") or []
    questions = [str(q).strip() for q in configured if str(q).strip()]
    return questions or list(FOLLOW_UP_QUESTIONS)
