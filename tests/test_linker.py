"""Tests for the linker orchestrator: cascade, merges, extent updates and modes."""

import json
import logging

import pytest
from pydantic import ValidationError

from coref_linker.errors import MentionOrderError
from coref_linker.linker import Linker, LinkerConfig, LinkerMode, TraceRecorder
from coref_linker.mention import Gender, Mention, MentionContext, Number
from coref_linker.resolver import GoldLabelResolver, Resolver, ResolverClaim
from coref_linker.state import DiscourseEntity, DiscourseModel


class StubResolver(Resolver):
    """Resolver answering from a lookup function, recording every call."""

    def __init__(self, name, applies_to=None, pick=None, singular_pronoun=False):
        super().__init__()
        self._resolver_name = name
        self._singular_pronoun = singular_pronoun
        self.applies_to = applies_to
        self.pick = pick
        self.resolved = []
        self.retained = []
        self.trained = 0

    def can_resolve(self, mention):
        return self.applies_to is None or mention.text in self.applies_to

    def resolve(self, mention, model):
        self.resolved.append(mention.text)
        return self.pick(mention, model) if self.pick else None

    def retain(self, mention, model):
        self.retained.append(mention.text)
        return super().retain(mention, model)

    def train(self):
        self.trained += 1


def entity_with(text):
    """Pick the most recent entity holding a mention with this text."""

    def pick(mention, model):
        for entity in model.entities:
            if any(m.text == text for m in entity.mentions):
                return entity
        return None

    return pick


def make_mentions(*texts, sentence_index=0, ids=None):
    ids = ids or [-1] * len(texts)
    return [
        Mention(text=text, sentence_index=sentence_index, mention_id=mention_id, parse=object())
        for text, mention_id in zip(texts, ids)
    ]


def make_context(text, document_index=0, sentence_index=0, **features):
    return MentionContext(
        mention=Mention(text=text, sentence_index=sentence_index, parse=object()),
        document_index=document_index,
        sentence_index=sentence_index,
        index_in_sentence=0,
        mentions_in_sentence=1,
        **features,
    )


def seeded_model(*texts):
    """Model with one single-mention entity per text, the last text most recent."""
    model = DiscourseModel()
    entities = []
    for offset, text in enumerate(texts):
        entity = DiscourseEntity.from_mention(make_context(text, document_index=offset))
        model.add_entity(entity)
        entities.append(entity)
    return model, entities


@pytest.fixture
def pronoun_linker():
    pronouns = StubResolver(
        "pronoun", applies_to={"he", "she"}, pick=entity_with("John"), singular_pronoun=True
    )
    names = StubResolver("names", applies_to={"John", "Mary"})
    return Linker([pronouns, names])


class TestCascade:
    """Tests for resolving mentions through the cascade."""

    def test_pronoun_joins_antecedent(self, pronoun_linker):
        """'he' joins John's entity; Mary starts a new, more recent one."""
        entities = pronoun_linker.get_entities_from_mentions(make_mentions("John", "he", "Mary"))

        assert len(entities) == 2
        mary, john = entities
        assert [m.text for m in mary.mentions] == ["Mary"]
        assert [m.text for m in john.mentions] == ["John", "he"]
        assert john.entity_id == 1
        assert mary.entity_id == 2

    def test_every_applicable_resolver_is_asked(self):
        first = StubResolver("first", pick=entity_with("John"))
        second = StubResolver("second", applies_to={"he"})

        Linker([first, second]).get_entities_from_mentions(make_mentions("John", "he"))

        assert first.resolved == ["John", "he"]
        assert second.resolved == ["he"]

    def test_conflicting_claims_merge(self):
        """Two resolvers naming different entities merge them into the first."""
        model, (e1, e2) = seeded_model("John Smith", "Mr. Smith")
        linker = Linker([
            StubResolver("a", pick=lambda mention, model: e1),
            StubResolver("b", pick=lambda mention, model: e2),
        ])

        linker.resolve(make_context("Smith", document_index=2), model)

        assert model.entity_count == 1
        survivor = model.get_entity(0)
        assert survivor is e1
        assert [m.text for m in survivor.mentions] == ["John Smith", "Mr. Smith", "Smith"]
        assert e2 not in model

    def test_unresolvable_mention_discarded(self, pronoun_linker):
        model, _ = seeded_model("John")

        pronoun_linker.resolve(make_context("a dog", document_index=1), model)

        assert model.entity_count == 1
        assert len(pronoun_linker.trace.filter_by_type("MENTION_DISCARDED")) == 1

    def test_unresolvable_mention_kept_as_singleton(self):
        linker = Linker(
            [StubResolver("names", applies_to={"John"})],
            config=LinkerConfig(remove_unresolved_mentions=False),
        )

        entities = linker.get_entities_from_mentions(make_mentions("John", "a dog"))

        assert [str(e) for e in entities] == ["[ a dog ]", "[ John ]"]

    def test_flat_mode_shares_ids(self):
        """Without the discourse model every mention is its own entity, co-indexed by id."""
        pronouns = StubResolver("pronoun", applies_to={"he", "him", "his"}, pick=entity_with("John"))
        linker = Linker(
            [pronouns],
            config=LinkerConfig(use_discourse_model=False, remove_unresolved_mentions=False),
        )

        model = linker.link_mentions(make_mentions("John", "he", "him", "his"))

        assert model.entity_count == 4
        assert all(e.mention_count == 1 for e in model.entities)
        assert {e.entity_id for e in model.entities} == {1}
        assert model.next_entity_id == 5

    def test_singular_pronoun_miss_discards_mention(self):
        pronouns = StubResolver("pronoun", applies_to={"it"}, singular_pronoun=True)
        names = StubResolver("names", applies_to={"John"})
        linker = Linker(
            [names, pronouns], config=LinkerConfig(remove_unresolved_mentions=False)
        )

        entities = linker.get_entities_from_mentions(make_mentions("John", "it"))

        assert linker.singular_pronoun_index == 1
        assert [str(e) for e in entities] == ["[ John ]"]

    def test_singular_pronoun_index_from_config(self):
        resolvers = [StubResolver("a"), StubResolver("b")]
        linker = Linker(resolvers, config=LinkerConfig(singular_pronoun_index=1))

        assert linker.singular_pronoun_index == 1

    def test_singular_pronoun_index_out_of_range(self):
        with pytest.raises(ValueError):
            Linker([StubResolver("a")], config=LinkerConfig(singular_pronoun_index=3))

    def test_no_singular_pronoun_resolver(self):
        assert Linker([StubResolver("a")]).singular_pronoun_index == -1


class TestCheckForMerges:
    """Tests for reconciling resolver claims."""

    def test_first_match_absorbs_later_ones(self):
        model, (e1, e2, e3) = seeded_model("John", "Mr. Smith", "Smith")
        claims = [
            ResolverClaim.not_applicable("a"),
            ResolverClaim.from_entity("b", e2),
            ResolverClaim.from_entity("c", None),
            ResolverClaim.from_entity("d", e1),
            ResolverClaim.from_entity("e", e1),
            ResolverClaim.from_entity("f", e2),
        ]
        linker = Linker([])

        survivor = linker.check_for_merges(model, claims)

        assert survivor is e2
        assert model.entity_count == 2
        assert [m.text for m in e2.mentions] == ["Mr. Smith", "John"]
        assert len(linker.trace.filter_by_type("ENTITIES_MERGED")) == 1

    def test_no_match_returns_none(self):
        model, _ = seeded_model("John")
        claims = [ResolverClaim.from_entity("a", None), ResolverClaim.not_applicable("b")]

        assert Linker([]).check_for_merges(model, claims) is None
        assert model.entity_count == 1


class TestUpdateExtent:
    """Tests for recording a mention in the model."""

    @pytest.mark.parametrize(
        "mention_confidence,expected",
        [(0.9, Gender.FEMALE), (0.5, Gender.MALE), (0.2, Gender.MALE)],
    )
    def test_gender_overwritten_only_when_more_confident(self, mention_confidence, expected):
        model, (entity,) = seeded_model("Pat")
        entity.gender = Gender.MALE
        entity.gender_confidence = 0.5
        mention = make_context("she", 1, gender=Gender.FEMALE, gender_confidence=mention_confidence)

        Linker([]).update_extent(model, mention, entity, True)

        assert entity.gender == expected
        assert entity.mention_count == 2

    def test_number_overwritten_independently(self):
        model, (entity,) = seeded_model("the team")
        entity.number = Number.SINGULAR
        entity.number_confidence = 0.8
        mention = make_context(
            "they", 1, number=Number.PLURAL, number_confidence=0.95, gender_confidence=0.0
        )

        Linker([]).update_extent(model, mention, entity, True)

        assert entity.number == Number.PLURAL
        assert entity.number_confidence == 0.95
        assert entity.gender == Gender.UNKNOWN

    def test_mentioned_entity_promoted(self):
        model, (john, mary) = seeded_model("John", "Mary")

        Linker([]).update_extent(model, make_context("he", 2), john, True)

        assert model.entities == [john, mary]

    def test_new_entity_without_antecedent(self):
        model, (john,) = seeded_model("John")
        linker = Linker([])

        linker.update_extent(model, make_context("Mary", 1), None, True)

        assert model.entity_count == 2
        assert model.get_entity(0).entity_id == 2
        assert linker.trace.filter_by_type("ENTITY_CREATED")[0].data == {"entity_id": 2}

    def test_flat_mode_copies_antecedent_id(self):
        model, (john,) = seeded_model("John")

        Linker([]).update_extent(model, make_context("he", 1), john, False)

        newest = model.get_entity(0)
        assert newest is not john
        assert newest.entity_id == john.entity_id
        assert john.mention_count == 1
        assert model.next_entity_id == 3


class TestModes:
    """Tests for TEST, TRAIN, EVAL and SIM behaviour."""

    def test_mode_from_string(self):
        assert LinkerConfig(mode="train").mode == LinkerMode.TRAIN

    def test_train_last_resolver_does_not_count(self):
        """A mention only the final TRAIN resolver applies to is dropped."""
        nouns = StubResolver("nouns", applies_to={"John"})
        linker = Linker([nouns, GoldLabelResolver()], config=LinkerConfig(mode=LinkerMode.TRAIN))

        entities = linker.get_entities_from_mentions(make_mentions("John", "a dog", ids=[1, 2]))

        assert [str(e) for e in entities] == ["[ John ]"]
        assert nouns.retained == ["John"]
        assert nouns.resolved == []

    def test_test_mode_counts_last_resolver(self):
        nouns = StubResolver("nouns", applies_to={"John"})
        linker = Linker([nouns, GoldLabelResolver()])

        entities = linker.get_entities_from_mentions(make_mentions("John", "a dog", ids=[1, 2]))

        assert [str(e) for e in entities] == ["[ a dog ]", "[ John ]"]
        assert nouns.resolved == ["John"]

    def test_eval_uses_gold_labels(self):
        gold = GoldLabelResolver()
        linker = Linker([gold], config=LinkerConfig(mode=LinkerMode.EVAL))

        entities = linker.get_entities_from_mentions(
            make_mentions("John", "Mary", "he", ids=[1, 2, 1])
        )

        john = next(e for e in entities if e.mentions[0].text == "John")
        assert [m.text for m in john.mentions] == ["John", "he"]
        assert entities[0] is john
        assert gold.distances[1] == 1

    def test_eval_calls_retain(self):
        stub = StubResolver("stub")
        linker = Linker([stub], config=LinkerConfig(mode=LinkerMode.EVAL))

        linker.get_entities_from_mentions(make_mentions("John", "he"))

        assert stub.retained == ["John", "he"]
        assert stub.resolved == []

    def test_sim_mode_skips_cascade(self):
        stub = StubResolver("stub", pick=entity_with("John"))
        linker = Linker([stub], config=LinkerConfig(mode=LinkerMode.SIM))

        model = linker.link_mentions(make_mentions("John", "he"))

        assert model.entity_count == 0
        assert stub.resolved == []
        assert stub.retained == []
        assert len(linker.trace.filter_by_type("MODE_SKIPPED")) == 2

    def test_sim_mode_skips_features(self):
        linker = Linker([], config=LinkerConfig(mode=LinkerMode.SIM))

        contexts = linker.construct_mention_contexts(make_mentions("he"))

        assert contexts[0].gender == Gender.UNKNOWN
        assert contexts[0].gender_confidence == 0.0

    def test_unknown_mode_logged_and_skipped(self, caplog):
        stub = StubResolver("stub")
        linker = Linker([stub])
        linker.mode = "bogus"

        with caplog.at_level(logging.ERROR, logger="coref_linker"):
            model = linker.link_mentions(make_mentions("John"))

        assert model.entity_count == 0
        assert stub.resolved == []
        assert "Unknown linker mode" in caplog.text

    def test_train_forwards_to_resolvers(self):
        resolvers = [StubResolver("a"), StubResolver("b")]

        Linker(resolvers).train()

        assert [r.trained for r in resolvers] == [1, 1]

    def test_set_entities_returns_nothing(self):
        stub = StubResolver("stub")
        linker = Linker([stub, GoldLabelResolver()], config=LinkerConfig(mode=LinkerMode.TRAIN))

        result = linker.set_entities_from_mentions(make_mentions("John", "he", ids=[1, 1]))

        assert result is None
        assert stub.retained == ["John", "he"]
        assert stub.distances[0] == 1


class TestRuns:
    """Tests for entry points and run isolation."""

    def test_none_rejected(self, pronoun_linker):
        with pytest.raises(ValueError):
            pronoun_linker.get_entities_from_mentions(None)

    def test_out_of_order_sentences_rejected(self, pronoun_linker):
        mentions = [
            Mention(text="John", sentence_index=1, parse=object()),
            Mention(text="he", sentence_index=0, parse=object()),
        ]

        with pytest.raises(MentionOrderError):
            pronoun_linker.get_entities_from_mentions(mentions)

    def test_runs_are_independent(self, pronoun_linker):
        first = pronoun_linker.get_entities_from_mentions(make_mentions("John", "he"))
        second = pronoun_linker.get_entities_from_mentions(make_mentions("John", "he"))

        assert [e.entity_id for e in first] == [e.entity_id for e in second] == [1]
        assert first[0] is not second[0]

    def test_heuristic_cascade(self):
        mentions = [
            Mention(text="John", sentence_index=0, head_tag="NNP", parse=object()),
            Mention(text="he", sentence_index=0, head_tag="PRP", parse=object()),
            Mention(text="Mary", sentence_index=1, head_tag="NNP", parse=object()),
        ]

        mary, john = Linker.from_config().get_entities_from_mentions(mentions)

        assert [m.text for m in john.mentions] == ["John", "he"]
        assert john.gender == Gender.MALE
        assert [m.text for m in mary.mentions] == ["Mary"]

    def test_heuristic_cascade_keeps_indefinite_antecedent(self):
        """'the company' joins 'a company'; 'I' starts its own entity."""
        mentions = [
            Mention(text="a company", sentence_index=0, head_tag="NN", parse=object()),
            Mention(text="the company", sentence_index=1, head_tag="NN", parse=object()),
            Mention(text="I", sentence_index=1, head_tag="PRP", parse=object()),
        ]

        entities = Linker.from_config(LinkerConfig()).get_entities_from_mentions(mentions)

        assert [str(e) for e in entities] == ["[ I ]", "[ a company, the company ]"]

    def test_heuristic_cascade_plural_and_speech_pronouns(self):
        mentions = [
            Mention(text="I", sentence_index=0, head_tag="PRP", parse=object()),
            Mention(text="shares", sentence_index=0, head_tag="NNS", parse=object()),
            Mention(text="me", sentence_index=0, head_tag="PRP", parse=object()),
            Mention(text="shares", sentence_index=1, head_tag="NNS", parse=object()),
        ]

        entities = Linker.from_config().get_entities_from_mentions(mentions)

        assert [str(e) for e in entities] == ["[ shares, shares ]", "[ I, me ]"]


class TestConfig:
    """Tests for configuration and construction from registry names."""

    @pytest.mark.parametrize(
        "field,value", [("singular_pronoun_index", -1), ("merge_confidence", 1.5)]
    )
    def test_invalid_values_rejected(self, field, value):
        with pytest.raises(ValidationError):
            LinkerConfig(**{field: value})

    def test_default_cascade(self):
        linker = Linker.from_config()

        assert [r.name for r in linker.resolvers] == [
            "singular_pronoun",
            "proper_noun",
            "definite_noun",
            "plural_pronoun",
            "plural_noun",
            "common_noun",
            "speech_pronoun",
        ]
        assert linker.singular_pronoun_index == 0

    def test_train_appends_gold_label(self):
        linker = Linker.from_config(LinkerConfig(mode="train"))

        assert linker.resolvers[-1].name == "gold_label"
        assert len(linker.resolvers) == 8

    def test_gold_label_not_duplicated(self):
        config = LinkerConfig(mode="train", resolvers=["proper_noun", "gold_label"])

        assert [r.name for r in Linker.from_config(config).resolvers] == ["proper_noun", "gold_label"]


class TestTrace:
    """Tests for the decision trace."""

    def test_events_recorded(self, pronoun_linker):
        pronoun_linker.get_entities_from_mentions(make_mentions("John", "he", "Mary"))
        trace = pronoun_linker.trace

        assert len(trace.filter_by_type("ENTITY_CREATED")) == 2
        assert len(trace.filter_by_type("ENTITY_MENTIONED")) == 1
        claims = trace.filter_by_type("RESOLVER_CLAIM")
        assert [(e.resolver_name, e.data["status"]) for e in claims] == [
            ("names", "NO_MATCH"), ("pronoun", "MATCHED"), ("names", "NO_MATCH")
        ]
        assert [e.event_type for e in trace.filter_by_mention(1)] == [
            "RESOLVER_CLAIM", "ENTITY_MENTIONED"
        ]

    def test_trace_cleared_per_run(self, pronoun_linker):
        pronoun_linker.get_entities_from_mentions(make_mentions("John", "he"))
        count = len(pronoun_linker.trace.events)
        pronoun_linker.get_entities_from_mentions(make_mentions("John", "he"))

        assert len(pronoun_linker.trace.events) == count

    def test_export_json(self, pronoun_linker):
        pronoun_linker.get_entities_from_mentions(make_mentions("John", "he"))

        exported = json.loads(pronoun_linker.trace.export_json())

        assert len(exported) == len(pronoun_linker.trace.events)
        assert exported[-1]["event_type"] == "ENTITY_MENTIONED"
        assert exported[-1]["mention_index"] == 1

    def test_trace_disabled(self):
        linker = Linker([StubResolver("a")], config=LinkerConfig(include_trace=False))

        linker.get_entities_from_mentions(make_mentions("John", "he"))

        assert linker.trace.events == []

    def test_entity_history(self, pronoun_linker):
        pronoun_linker.get_entities_from_mentions(make_mentions("John", "he", "Mary"))

        history = pronoun_linker.trace.entity_history(1)

        assert [e.event_type for e in history] == [
            "ENTITY_CREATED", "RESOLVER_CLAIM", "ENTITY_MENTIONED"
        ]
        assert [e.mention_index for e in history] == [0, 1, 1]

    def test_summary_counts_every_type(self, pronoun_linker):
        pronoun_linker.get_entities_from_mentions(make_mentions("John", "he", "a dog"))

        summary = pronoun_linker.trace.summary()

        assert summary["ENTITY_CREATED"] == 1
        assert summary["ENTITY_MENTIONED"] == 1
        assert summary["MENTION_DISCARDED"] == 1
        assert summary["ENTITIES_MERGED"] == 0
        assert summary["MODE_SKIPPED"] == 0

    def test_unknown_event_type_rejected(self):
        with pytest.raises(ValueError):
            TraceRecorder().log("NOT_AN_EVENT", {})
