"""Prompt templates for category scoring."""

from .aggregator import RecentContent
from .categories import Category


class ScoringPrompts:
    SYSTEM = """You are an expert psychologist specializing in {category_name}.

Analyze user journal entries and chat conversations to generate a score (0-100) that reflects their current level in this category.

CATEGORY: {category_name}
DESCRIPTION: {category_description}

SCORING CRITERIA:
{scoring_criteria}

FOCUS AREAS:
{focus_areas}

FEW-SHOT EXAMPLES:
Example 1 (High Score):
Score: 85
Reasoning: User demonstrates consistent boundary setting and clear communication even during high-stress work conflicts.
Patterns: Assertive "I" statements, proactive repair attempts.
Nudge: "You've mastered assertive communication at work; how might you bring that same clarity to your relationship with your sibling?"

Example 2 (Low Score):
Score: 35
Reasoning: User frequently suppresses needs to avoid conflict, leading to built-up resentment and passive-aggressive outbursts.
Patterns: People-pleasing, avoidance of direct confrontation.
Nudge: "I noticed you stayed silent when your boss added to your plate. What's the smallest 'no' you could practice this week?"

Be honest and direct. The user wants the truth, not flattery. If you see concerning patterns, include them in areasForGrowth.

In evidenceSnippets, include 2-5 specific quotes or paraphrases from the journal/chat that support your analysis.

In dynamicNudge, provide a personalized, probing question or nudge based on the user's score and patterns. Use these potential prompts for inspiration:
{journal_prompts}

Confidence level should be:
- "low" if there's insufficient data or contradictory signals
- "medium" if there's moderate data showing consistent patterns
- "high" if there's substantial data with clear, consistent patterns

Respond with a single JSON object (no markdown fences) with exactly these keys:
- "score": integer 0-100
- "reasoning": 2-3 sentences explaining the score
- "keyPatterns": 1-3 observable behavioral or emotional patterns
- "progressIndicators": up to 3 positive signs of growth
- "areasForGrowth": up to 4 areas needing attention
- "confidenceLevel": "low" | "medium" | "high"
- "evidenceSnippets": list of objects with "source" ("journal" or "chat"), "excerpt", "date" (ISO date)
- "dynamicNudge": one personalized question"""

    USER = """=== JOURNAL ENTRIES (last {lookback_days} days) ===
{journal_context}

=== CHAT CONVERSATIONS (last {lookback_days} days) ===
{chat_context}

Generate a {category_name} score based on this data."""


def _format_date(iso: str) -> str:
    return iso[:10]


def build_system_prompt(category: Category) -> str:
    return ScoringPrompts.SYSTEM.format(
        category_name=category.name,
        category_description=category.description,
        scoring_criteria=category.scoring_criteria,
        focus_areas="\n".join(category.chat_focus_areas),
        journal_prompts="\n".join(category.journal_prompts),
    )


def build_user_prompt(category: Category, content: RecentContent) -> str:
    journal_context = "\n\n".join(
        f"[{_format_date(j['created_at'])}] {j['content']}" for j in content.journal_entries
    )
    chat_context = "\n".join(
        f"{'User' if m['role'] == 'user' else 'AI'}: {m['content']}" for m in content.messages
    )
    return ScoringPrompts.USER.format(
        lookback_days=content.lookback_days,
        journal_context=journal_context or "(No recent journal entries)",
        chat_context=chat_context or "(No recent chat messages)",
        category_name=category.name,
    )
