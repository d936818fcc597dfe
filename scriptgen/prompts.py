"""
Centralized prompt templates used by the script pipeline.
"""

from __future__ import annotations


NO_RESEARCH_PLACEHOLDER: str = "No research data available. Generate the script from general knowledge."

SCRIPT_GENERATION_PROMPT: str = (
    "You write narrated scripts for educational YouTube videos.\n\n"
    "SCRIPT REQUIREMENTS:\n"
    "- Write in English, as plain narration with no headings, stage directions, or markdown.\n"
    "- Aim for 1200-1500 words in total.\n"
    "- Open with one short line that welcomes the viewer and says what today's video covers, "
    "then move straight into the first item.\n"
    "- Give every major item, level, or category of the topic its own paragraph of roughly 120-180 words.\n\n"
    "METHOD:\n"
    "1. List every main item the title \"{title}\" implies before writing. Do not leave out major categories.\n"
    "2. Write one paragraph per item in a logical order (chronological, smallest to largest, and so on).\n"
    "3. Start each paragraph with the item's name, e.g. \"First Generation. This generation marks...\".\n"
    "4. In each paragraph explain what the item is, its defining characteristics, its historical context "
    "with dates, and exactly one concrete real-world example described in detail.\n\n"
    "STYLE REFERENCE (from \"Every Fighter Jet Generation Explained\"):\n"
    "\"First Generation. This generation marks the dawn of the jet age, from the late 1940s to the early "
    "1950s. The defining feature was the move from piston-engine propellers to turbojet engines. These "
    "aircraft were subsonic, armed with machine guns or cannons, and had neither radar nor guided missiles. "
    "Combat was purely visual and depended on the pilot's skill in a classic dogfight. The most famous "
    "matchup of the era came during the Korean War, when the F-86 Sabre met the MiG-15.\"\n\n"
    "ENDING:\n"
    "Close with exactly this shape: \"Thanks for watching. <QUESTION> Let me know in the comments down below. "
    "Also, be sure to like and subscribe if you enjoyed.\" The question must be specific to the topic and "
    "invite viewers to share an opinion or experience, for example \"Which of these impressed you the most?\" "
    "or \"What do you think the future of {title} will look like?\".\n\n"
    "Use the research notes below for facts, names, and dates.\n\n"
    "TITLE: \"{title}\"\n\n"
    "RESEARCH NOTES:\n"
    "{research}\n\n"
    "Write the complete script now. Keep going until every item is covered and the total is at least 1200 words."
)

RESEARCH_PROMPT: str = (
    "You are a research assistant preparing material for a 5-10 minute educational YouTube video.\n\n"
    "Topic: \"{title}\"\n\n"
    "Provide, in clearly labelled sections:\n"
    "1. Key concepts and definitions\n"
    "2. Historical context with important dates and events\n"
    "3. The current state of the topic, including recent developments and figures\n"
    "4. Specific real-world examples\n"
    "5. Technical details on how things work\n"
    "6. Lesser-known facts that would keep viewers engaged\n"
    "7. Notable expert findings or opinions\n"
    "8. Ideas for what could be shown on screen\n\n"
    "Favour accuracy and specific names, numbers, and dates over generalities."
)


def format_script_prompt(*, title: str, research: str) -> str:
    """Return the script prompt for `title` with the compiled research embedded."""

    return SCRIPT_GENERATION_PROMPT.replace("{title}", title).replace("{research}", research)


def format_research_prompt(*, title: str) -> str:
    """Return the standalone research prompt for `title`."""

    return RESEARCH_PROMPT.replace("{title}", title)
