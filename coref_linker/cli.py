"""Command line entry-point for linking the mentions of a JSON document."""

from __future__ import annotations

import json
import logging
from typing import TextIO

import click
from pydantic import ValidationError

from .document import Document
from .errors import MentionOrderError
from .linker import EventType, Linker, LinkerConfig, LinkerMode
from .state import DiscourseEntity, DiscourseModel


def _annotate_sentences(document: Document, entities: list[DiscourseEntity]) -> list[str]:
    """
    Mark coreferent mentions in the sentence text.

    Only entities with more than one mention are shown; each is numbered by
    recency rank + 1, e.g. "[John]#2 said [he]#2 left."
    """
    markers: dict[int, list[tuple[int, int, int, str]]] = {}
    for rank, entity in enumerate(entities):
        if entity.mention_count <= 1:
            continue
        for mention in entity.mentions:
            if mention.span is None:
                continue
            start, end = mention.span
            inserts = markers.setdefault(mention.sentence_index, [])
            # Sort keys: closers before openers at the same offset, inner closers
            # first, outer openers first
            inserts.append((start, 1, -end, "["))
            inserts.append((end, 0, -start, f"]#{rank + 1}"))

    annotated = []
    for index, sentence in enumerate(document.sentences):
        pieces = []
        position = 0
        for offset, _, _, text in sorted(markers.get(index, [])):
            pieces.append(sentence[position:offset])
            pieces.append(text)
            position = offset
        pieces.append(sentence[position:])
        annotated.append("".join(pieces))
    return annotated


def _format_output(model: DiscourseModel, linker: Linker) -> dict:
    """Format linking result for JSON output."""
    entities = []
    for rank, entity in enumerate(model.entities):
        entities.append({
            "id": entity.entity_id,
            "rank": rank,
            "mentions": [m.text for m in entity.mentions],
            "mention_count": entity.mention_count,
            "gender": entity.gender.value,
            "gender_confidence": entity.gender_confidence,
            "number": entity.number.value,
            "number_confidence": entity.number_confidence,
        })

    events = linker.trace.summary()
    stats = {
        "entities_count": model.entity_count,
        "mentions_linked": sum(e.mention_count for e in model.entities),
        "merges": events[EventType.ENTITIES_MERGED.value],
        "discarded": events[EventType.MENTION_DISCARDED.value],
    }

    return {
        "entities": entities,
        "stats": stats,
    }


@click.command()
@click.option("--input", "-i", type=click.File("r"), default="-", help="Document JSON path (defaults to stdin)")
@click.option("--output", "-o", type=click.File("w"), default="-", help="Output destination (defaults to stdout)")
@click.option(
    "--mode",
    type=click.Choice([m.value for m in LinkerMode]),
    default=LinkerMode.TEST.value,
    show_default=True,
    help="Linker mode",
)
@click.option("--flat", is_flag=True, help="Co-index mentions by id instead of merging them into entities")
@click.option("--keep-unresolved", is_flag=True, help="Keep mentions no resolver applies to as singletons")
@click.option("--annotate", is_flag=True, help="Include sentences with coreferent mentions marked")
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose logging")
def main(
    input: TextIO,
    output: TextIO,
    mode: str,
    flat: bool,
    keep_unresolved: bool,
    annotate: bool,
    verbose: bool,
) -> None:
    """Group the mentions of a document into coreferent entities."""

    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s: %(message)s",
    )

    raw = input.read()
    if not raw.strip():
        raise click.ClickException("No document supplied")

    try:
        document = Document.model_validate_json(raw)
    except ValidationError as exc:
        raise click.ClickException(f"Invalid document: {exc}") from exc

    config = LinkerConfig(
        mode=LinkerMode(mode),
        use_discourse_model=not flat,
        remove_unresolved_mentions=not keep_unresolved,
    )
    linker = Linker.from_config(config)

    try:
        model = linker.link_mentions(document.to_mentions())
    except MentionOrderError as exc:
        raise click.ClickException(str(exc)) from exc
    if config.mode == LinkerMode.TRAIN:
        linker.train()

    result = _format_output(model, linker)
    if annotate:
        result["annotated"] = _annotate_sentences(document, model.entities)

    json.dump(result, output, indent=2)
    output.write("\n")


if __name__ == "__main__":
    main()
