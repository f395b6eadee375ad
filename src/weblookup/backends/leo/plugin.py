"""dict.leo.org dictionary backend."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Dict

from weblookup.backends.base import (
    CompletionRegistry,
    Invocation,
    LookupBackend,
)
from weblookup.backends.errors import ArgumentError, ValidationError
from weblookup.backends.hook_types import (
    POST_LAUNCH,
    PRE_LAUNCH,
    QUERY_RESOLVED,
    PostLaunchContext,
    PreLaunchContext,
)
from weblookup.backends.options import OptionSpec, build_schema
from weblookup.url_utils import build_url, encode_query, encoded_query

logger = logging.getLogger(__name__)

LEO_BASE_URL = "https://dict.leo.org/"
LANGUAGE_STYLE = "language"
INTERFACE_LANGUAGE_STYLE = "interface-language"
DEFAULT_LANGUAGE = "ende"
DEFAULT_INTERFACE_LANGUAGE = "en"
CATALOG_COLUMN_WIDTH = 8
LANGUAGE_FLAG = "-l"


@dataclass(frozen=True)
class LanguagePair:
    code: str
    description: str


LANGUAGE_PAIRS: Dict[str, LanguagePair] = {
    pair.code: pair
    for pair in (
        LanguagePair("ende", "english german"),
        LanguagePair("frde", "french german"),
        LanguagePair("esde", "spanish german"),
        LanguagePair("itde", "italian german"),
        LanguagePair("chde", "chinese german"),
        LanguagePair("rude", "russian german"),
        LanguagePair("ptde", "portuguese german"),
        LanguagePair("plde", "polish german"),
    )
}


@dataclass(frozen=True)
class TargetRequest:
    """Resolved lookup, ready to become a URI."""

    interface_language: str
    pair: str
    encoded_query: str

    def uri(self) -> str:
        return build_url(
            LEO_BASE_URL,
            (
                ("search", self.encoded_query),
                ("lp", encode_query(self.pair)),
                ("lang", encode_query(self.interface_language)),
            ),
        )


def complete_language_pairs() -> Dict[str, str]:
    """Language pair codes with their descriptions, in catalog order."""
    return {code: pair.description for code, pair in LANGUAGE_PAIRS.items()}


def validate_language(code: str) -> str:
    """Return ``code`` when it names a catalog entry."""
    if code not in LANGUAGE_PAIRS:
        raise ValidationError(f"unknown language pair: {code}")
    return code


class LeoBackend(LookupBackend):
    """Translate words between German and other languages on dict.leo.org."""

    name = "leo"
    options = build_schema(
        [
            OptionSpec(
                LANGUAGE_FLAG,
                takes_value=True,
                help="language pair to translate between",
                metavar="PAIR",
            ),
        ]
    )

    def describe(self) -> str:
        return "dict.leo.org: translate between German and other languages"

    def register_completions(self, registry: CompletionRegistry) -> None:
        registry.register(LANGUAGE_FLAG, complete_language_pairs)

    def render_help(self, invocation: Invocation) -> str:
        language = invocation.style(LANGUAGE_STYLE, DEFAULT_LANGUAGE)
        interface = invocation.style(
            INTERFACE_LANGUAGE_STYLE, DEFAULT_INTERFACE_LANGUAGE
        )
        lines = [
            f"usage: lookup {self.name} [-l PAIR] QUERY...",
            "",
            "Look up QUERY on dict.leo.org.",
            "",
            "options:",
        ]
        for spec in self.options:
            lines.append(f"  {spec.flag} {spec.metavar:<6} {spec.help}")
        lines.extend(["", "language pairs:"])
        for code, pair in LANGUAGE_PAIRS.items():
            lines.append(f"{code:>{CATALOG_COLUMN_WIDTH}}  {pair.description}")
        lines.extend(
            [
                "",
                f"defaults for {invocation.context}",
                f"  {LANGUAGE_STYLE:<20}{language}",
                f"  {INTERFACE_LANGUAGE_STYLE:<20}{interface}",
                "",
                "examples:",
                f"  lookup {self.name} sugar",
                f"  lookup {self.name} -l frde sucre",
            ]
        )
        return "\n".join(lines) + "\n"

    def execute(self, invocation: Invocation) -> int:
        try:
            parsed = self.parse(invocation)
        except ArgumentError as exc:
            invocation.error(str(exc))
            return self.show_help(invocation, failed=True)

        language = parsed.get(LANGUAGE_FLAG.lstrip("-"))
        if language is None:
            language = invocation.style(LANGUAGE_STYLE, DEFAULT_LANGUAGE)
        interface = invocation.style(
            INTERFACE_LANGUAGE_STYLE, DEFAULT_INTERFACE_LANGUAGE
        )

        invocation.query = " ".join(parsed.positionals)
        invocation.query = str(
            invocation.hooks.invoke_chain(QUERY_RESOLVED, invocation.query)
        )
        query_given = bool(invocation.query.strip())

        try:
            validate_language(str(language))
        except ValidationError as exc:
            invocation.error(str(exc))
            invocation.query = ""

        if not invocation.query.strip():
            if query_given:
                logger.debug("query dropped after language validation failed")
            else:
                invocation.error("no query given")
            return self.show_help(invocation, failed=True)

        request = TargetRequest(
            interface_language=str(interface),
            pair=str(language),
            encoded_query=encoded_query(invocation),
        )
        return self.launch(invocation, request)

    def launch(self, invocation: Invocation, request: TargetRequest) -> int:
        payload = invocation.hooks.invoke(
            PRE_LAUNCH,
            PreLaunchContext(backend=self.name, request=request, uri=request.uri()),
        )
        logger.info("opening %s for backend=%s", payload.uri, self.name)
        status = invocation.launcher.open(payload.uri)
        invocation.hooks.invoke(
            POST_LAUNCH,
            PostLaunchContext(backend=self.name, uri=payload.uri, status=status),
        )
        return status

