# Copyright 2025 Amazon.com, Inc. or its affiliates.
# SPDX-License-Identifier: Apache-2.0

"""
Text-to-speech narration for the DocWise Streamlit application.

Narration runs in the browser through the Web Speech API. The page embeds a
small script that picks a voice for the chosen locale and speaks the text.
"""

import json

import streamlit as st
import streamlit.components.v1 as components

from docwise.utils.html_utils import html_to_text

# BCP-47 locale -> display name
NARRATION_LANGUAGES = {
    "en-US": "English (US)",
    "en-GB": "English (UK)",
    "es-ES": "Spanish",
    "fr-FR": "French",
    "de-DE": "German",
    "it-IT": "Italian",
    "pt-BR": "Portuguese (Brazil)",
    "ru-RU": "Russian",
    "ja-JP": "Japanese",
    "ko-KR": "Korean",
    "zh-CN": "Chinese (Simplified)",
    "ar-SA": "Arabic",
    "hi-IN": "Hindi",
    "pl-PL": "Polish",
    "nl-NL": "Dutch",
    "sv-SE": "Swedish",
    "da-DK": "Danish",
    "no-NO": "Norwegian",
    "fi-FI": "Finnish",
    "cs-CZ": "Czech",
    "hu-HU": "Hungarian",
    "tr-TR": "Turkish",
    "th-TH": "Thai",
    "vi-VN": "Vietnamese",
    "he-IL": "Hebrew",
}

SPEECH_RATE = 1.0

_SPEAK_TEMPLATE = """
<script>
(function() {
  const synth = window.parent.speechSynthesis || window.speechSynthesis;
  if (!synth) { return; }
  synth.cancel();
  const text = %(text)s;
  const lang = %(lang)s;
  function speak() {
    const utterance = new SpeechSynthesisUtterance(text);
    utterance.lang = lang;
    utterance.rate = %(rate)s;
    const voices = synth.getVoices();
    const prefix = lang.split("-")[0];
    const voice = voices.find(v => v.lang === lang) ||
                  voices.find(v => v.lang && v.lang.startsWith(prefix));
    if (voice) { utterance.voice = voice; }
    synth.speak(utterance);
  }
  if (synth.getVoices().length) { speak(); } else { synth.onvoiceschanged = speak; }
})();
</script>
"""

_STOP_SCRIPT = """
<script>
(function() {
  const synth = window.parent.speechSynthesis || window.speechSynthesis;
  if (synth) { synth.cancel(); }
})();
</script>
"""


def narration_text(content: str, summary: str = "") -> str:
    """Text to read aloud: the document text, or the summary when there is none."""
    text = html_to_text(content) if content else ""
    return text or (summary or "")


def build_narration_script(text: str, lang: str = "en-US", action: str = "speak") -> str:
    """
    Build the browser script for a narration action.

    Args:
        text: Text to speak
        lang: BCP-47 locale; unknown locales fall back to en-US
        action: 'speak' or 'stop'

    Returns:
        HTML <script> snippet
    """
    if action == "stop":
        return _STOP_SCRIPT
    if lang not in NARRATION_LANGUAGES:
        lang = "en-US"
    return _SPEAK_TEMPLATE % {
        # "</" would close the surrounding script element
        "text": json.dumps(text).replace("</", "<\\/"),
        "lang": json.dumps(lang),
        "rate": SPEECH_RATE,
    }


def display_narration_controls(content: str, summary: str = "") -> None:
    """
    Render the language selector and Listen/Stop buttons.

    Args:
        content: Accessible HTML fragment
        summary: Summary used when the content has no text
    """
    st.subheader("🔊 Listen")
    locales = list(NARRATION_LANGUAGES)
    current = st.session_state.get("narration_lang", "en-US")
    lang = st.selectbox(
        "Narration language",
        locales,
        index=locales.index(current) if current in locales else 0,
        format_func=lambda code: f"{NARRATION_LANGUAGES[code]} ({code})",
    )
    st.session_state["narration_lang"] = lang

    listen_col, stop_col = st.columns(2)
    with listen_col:
        listen = st.button("▶️ Listen", use_container_width=True)
    with stop_col:
        stop = st.button("⏹️ Stop", use_container_width=True)

    if listen:
        text = narration_text(content, summary)
        if not text:
            st.warning("There is no text to read aloud.")
            return
        components.html(build_narration_script(text, lang), height=0)
    elif stop:
        components.html(build_narration_script("", lang, action="stop"), height=0)
