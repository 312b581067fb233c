"""
Input document schema for the command-line driver.
"""

from typing import List, Optional, Tuple

from pydantic import BaseModel, Field, model_validator

from .mention.models import Mention


class MentionRecord(BaseModel):
    """A mention as supplied in a JSON document"""
    text: str = Field(min_length=1)
    sentence: int = Field(ge=0, description="Index of the sentence holding the mention")
    start: Optional[int] = Field(default=None, ge=0, description="Character offset within the sentence")
    end: Optional[int] = Field(default=None, ge=0)
    head: Optional[str] = Field(default=None, description="Head word; defaults to the last token")
    tag: str = Field(default="", description="Part-of-speech tag of the head word")
    id: int = Field(default=-1, description="Gold coreference label, -1 if unlabeled")
    name_type: Optional[str] = None

    @model_validator(mode="after")
    def check_span(self) -> "MentionRecord":
        if (self.start is None) != (self.end is None):
            raise ValueError("start and end must be given together")
        if self.start is not None and self.end < self.start:
            raise ValueError("end must not precede start")
        return self


class Document(BaseModel):
    """Sentences of a document and the mentions found in them"""
    sentences: List[str] = Field(default_factory=list)
    mentions: List[MentionRecord]

    def locate(self, record: MentionRecord, taken: List[Tuple[int, int]], cursor: int) -> Optional[Tuple[int, int]]:
        """Find the span of a mention lacking offsets, skipping spans already used."""
        if record.sentence >= len(self.sentences):
            return None
        sentence = self.sentences[record.sentence]
        position = sentence.find(record.text, cursor)
        while position != -1:
            span = (position, position + len(record.text))
            if span not in taken:
                return span
            position = sentence.find(record.text, position + 1)
        return None

    def to_mentions(self) -> List[Mention]:
        """Convert records into mentions, filling in spans from the sentence text."""
        mentions = []
        taken: List[Tuple[int, int]] = []
        cursor = 0
        previous_sentence = None

        for record in self.mentions:
            if record.sentence != previous_sentence:
                taken = []
                cursor = 0
                previous_sentence = record.sentence

            if record.start is not None:
                span = (record.start, record.end)
            else:
                span = self.locate(record, taken, cursor)
            if span is not None:
                taken.append(span)
                cursor = span[0]

            mentions.append(
                Mention(
                    text=record.text,
                    sentence_index=record.sentence,
                    span=span,
                    head_text=record.head or "",
                    head_tag=record.tag,
                    mention_id=record.id,
                    parse=record,
                    name_type=record.name_type,
                )
            )
        return mentions
