"""
Citation Normalizer
Reshapes citation rows (or mentioned responses when no citations exist)
into one mention record shape for the "all mentions" and "recent mentions" feeds
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Iterable, List, Optional
from uuid import UUID

from app.adapters.storage import CitationRow, ResponseRecord
from app.models import CitationBucket

DIRECT = "direct"
INDIRECT = "indirect"


@dataclass
class MentionRecord:
    id: UUID
    question: str
    match_type: str  # "direct" or "indirect"
    snippet: str
    mention_quote: str
    created_at: datetime
    url: Optional[str] = None
    domain: Optional[str] = None
    title: Optional[str] = None
    favicon: Optional[str] = None
    influence_score: float = 0.0
    sentiment: Optional[str] = None


@dataclass
class MentionFeed:
    direct_count: int = 0
    indirect_count: int = 0
    total_count: int = 0
    all_mentions: List[MentionRecord] = field(default_factory=list)
    recent_mentions: List[MentionRecord] = field(default_factory=list)


class CitationNormalizer:
    """
    Builds mention records from either data source.

    Citation rows are preferred. A run whose citation pipeline never
    populated anything falls back to responses with a detected mention;
    both paths produce the same record shape.
    """

    def __init__(
        self,
        favicon_url_template: str = "https://www.google.com/s2/favicons?domain={domain}&sz=32",
        quote_length: int = 150,
    ):
        self.favicon_url_template = favicon_url_template
        self.quote_length = quote_length

    def favicon_for(self, domain: Optional[str]) -> Optional[str]:
        if not domain:
            return None
        return self.favicon_url_template.format(domain=domain)

    def quote_for(self, mention_context: Optional[str], full_response: str) -> str:
        """Prefer the detected mention context, else the start of the answer"""
        if mention_context:
            return mention_context
        return f"{full_response[:self.quote_length]}..."

    def normalize_citations(self, rows: Iterable[CitationRow]) -> List[MentionRecord]:
        return [
            MentionRecord(
                id=row.id,
                question=row.question,
                match_type=DIRECT if row.bucket == CitationBucket.OWNED.value else INDIRECT,
                snippet=row.citation_excerpt or f"Cited source: {row.citation_url}",
                mention_quote=self.quote_for(row.mention_context, row.full_response),
                created_at=row.created_at,
                url=row.citation_url,
                domain=row.citation_domain,
                title=row.citation_title,
                favicon=self.favicon_for(row.citation_domain),
                influence_score=row.influence_score,
            )
            for row in rows
        ]

    def normalize_responses(self, responses: Iterable[ResponseRecord]) -> List[MentionRecord]:
        mentions = []
        for response in responses:
            if not response.mention_detected:
                continue

            quote = self.quote_for(response.mention_context, response.full_response)
            mentions.append(
                MentionRecord(
                    id=response.id,
                    question=response.question,
                    match_type=DIRECT if response.mention_position == "primary" else INDIRECT,
                    snippet=quote,
                    mention_quote=quote,
                    created_at=response.created_at,
                    sentiment=response.mention_sentiment,
                )
            )
        return mentions

    def build_feed(
        self,
        citation_rows: List[CitationRow],
        responses: List[ResponseRecord],
        recent_limit: int = 5,
    ) -> MentionFeed:
        if citation_rows:
            mentions = self.normalize_citations(citation_rows)
        else:
            mentions = self.normalize_responses(responses)

        # Newest first; id keeps equal timestamps stable
        mentions.sort(key=lambda m: (m.created_at, str(m.id)), reverse=True)

        direct_count = sum(1 for m in mentions if m.match_type == DIRECT)

        return MentionFeed(
            direct_count=direct_count,
            indirect_count=len(mentions) - direct_count,
            total_count=len(mentions),
            all_mentions=mentions,
            recent_mentions=mentions[:recent_limit],
        )
