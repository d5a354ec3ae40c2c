import pytest

import npcbrain_cognition
from npcbrain_cognition import PrintEmitter, apply_perception, tick, tick_all
from npcbrain_environment import build_context
from npcbrain_memory import get_mid, get_short, insert_short, upsert_mid
from npcbrain_models import PerceptionPayload, ToneCategory
from npcbrain_proto import generate_word, get_top, get_word
from npcbrain_response import assemble_response, construct_response, discover, format_utterance
from npcbrain_social import get_phrases_from_others, record_phrase

NOW = 90_000_000


class RecordingEmitter:
    def __init__(self):
        self.published = []

    def publish(self, owner_id, text):
        self.published.append((owner_id, text))


# --- Response assembly ---

def test_empty_memory_falls_back_to_default_words(conn, fixed_rng):
    text = construct_response(conn, "barker", rng=fixed_rng(0.99))
    assert text == "Carefully, wares trade."


def test_discover_uses_fallback_pair_without_memory(conn):
    assert discover(conn, "barker", build_context()) == ["wares", "trade"]


def test_response_uses_top_cluster(conn, fixed_rng):
    insert_short(conn, "barker", phrase_heard="rusty pipe going cheap today", timestamp=NOW)

    response = assemble_response(conn, "barker", rng=fixed_rng(0.99), now=NOW)

    assert response.text == "Carefully, rusty pipe going."
    assert response.words == ["rusty", "pipe", "going", "cheap", "today"]
    assert response.tone == ToneCategory.CAUTIOUS
    assert response.proto_word is None


def test_social_overlap_shifts_tone(conn, fixed_rng):
    insert_short(conn, "barker", phrase_heard="rusty pipe", timestamp=NOW)
    record_phrase(conn, "smith", "who wants a rusty pipe", now=NOW)

    response = assemble_response(conn, "barker", rng=fixed_rng(0.99), now=NOW)

    assert response.social_overlap == pytest.approx(1.0)
    assert response.tone == ToneCategory.TRANSACTIONAL
    assert response.text == "Matter-of-fact, rusty pipe."


def test_proto_word_injected_and_reinforced(conn, fixed_rng, single_fragments):
    generate_word(conn, owner_id="coder")

    response = assemble_response(conn, "coder", allow_proto=True, rng=fixed_rng(0.0))

    assert response.proto_word == "kalomi"
    assert response.text == "Carefully, wares trade kalomi."
    assert get_word(conn, "kalomi").reinforcement_score == pytest.approx(0.55)


def test_proto_word_falls_back_to_shared_vocabulary(conn, fixed_rng, single_fragments):
    generate_word(conn, owner_id="coder")

    response = assemble_response(conn, "barker", allow_proto=True, rng=fixed_rng(0.0))

    assert response.proto_word == "kalomi"
    assert [w.word for w in get_top(conn, owner_id="barker")] == ["kalomi"]


def test_scene_limits_social_overlap(conn, fixed_rng):
    insert_short(conn, "barker", phrase_heard="rusty pipe", scene_id="alley", timestamp=NOW)
    record_phrase(conn, "smith", "rusty pipe for sale", scene_id="bazaar", now=NOW)

    assert assemble_response(conn, "barker", rng=fixed_rng(0.99), now=NOW).social_overlap == pytest.approx(1.0)
    local = construct_response(conn, "barker", rng=fixed_rng(0.99), scene_id="alley", now=NOW)
    assert local == "Carefully, rusty pipe."


def test_proto_word_skipped_when_not_allowed(conn, fixed_rng, single_fragments):
    generate_word(conn, owner_id="coder")
    response = assemble_response(conn, "coder", allow_proto=False, rng=fixed_rng(0.0))
    assert response.proto_word is None


def test_association_provider_words_are_merged(conn, fixed_rng):
    topics = []

    def provider(topic):
        topics.append(topic)
        return ["bazaar", "neon"]

    text = construct_response(conn, "broker", rng=fixed_rng(0.99), association_provider=provider)

    assert topics == ["wares trade"]
    assert text == "Carefully, bazaar."


def test_busy_crowd_and_familiar_player_raise_tone(conn, fixed_rng):
    env = build_context(entity_density=20)
    response = assemble_response(conn, "broker", environment=env, player_frequency=10, rng=fixed_rng(0.99))
    assert response.bias.bias == pytest.approx(0.7)
    assert response.tone == ToneCategory.FAMILIAR
    assert response.text.startswith("Easy, ")


def test_format_utterance():
    assert format_utterance("neutral", "hello there") == "Hello there."
    assert format_utterance("firm", "back off!") == "Firm, back off!"
    assert format_utterance("easy", "what now?") == "Easy, what now?"
    assert format_utterance("neutral", "") == "Wares trade."


# --- Cognitive loop ---

def test_apply_perception_inserts_short_row(conn):
    apply_perception(conn, PerceptionPayload(owner_id="smith", entity_seen="anvil", action_observed="hammering", scene_id="forge", timestamp=NOW))

    row = get_short(conn, "smith")[0]
    assert (row.entity_seen, row.action_observed, row.phrase_heard) == ("anvil", "hammering", None)
    assert row.scene_id == "forge"
    assert row.timestamp == NOW


def test_tick_speaks_and_records_phrase(conn, fixed_rng):
    emitter = RecordingEmitter()
    text = tick(conn, "barker", emitter, tick_index=1, rng=fixed_rng(0.0), now=NOW)

    assert text == "Carefully, wares trade."
    assert emitter.published == [("barker", text)]
    assert get_short(conn, "barker")[0].phrase_heard == text


def test_tick_stays_silent_on_failed_roll(conn, fixed_rng):
    emitter = RecordingEmitter()
    assert tick(conn, "barker", emitter, tick_index=1, rng=fixed_rng(0.5), now=NOW) is None
    assert emitter.published == []


def test_tick_without_emitter_never_speaks(conn, fixed_rng):
    assert tick(conn, "barker", None, tick_index=1, rng=fixed_rng(0.0), now=NOW) is None
    assert get_short(conn, "barker") == []


@pytest.mark.parametrize(
    "tick_index,short_left,mid_weight",
    [
        (0, 0, pytest.approx(0.475)),
        (1, 1, pytest.approx(0.5)),
        (3, 0, pytest.approx(0.5)),
        (5, 1, pytest.approx(0.475)),
    ],
)
def test_decay_cadence_is_independent_of_speech(conn, fixed_rng, tick_index, short_left, mid_weight):
    insert_short(conn, "fixer", entity_seen="drone", timestamp=NOW - 200_000)
    upsert_mid(conn, "fixer", "drone", delta=0.5, now=NOW - 700_000)

    tick(conn, "fixer", RecordingEmitter(), tick_index=tick_index, rng=fixed_rng(0.99), now=NOW)

    assert len(get_short(conn, "fixer")) == short_left
    assert get_mid(conn, "fixer")[0].correlation_weight == mid_weight


def test_tick_all_staggers_indices_and_shares_environment(conn, monkeypatch):
    calls = []

    def fake_tick(conn, owner_id, emitter, environment=None, tick_index=0, rng=None, now=None):
        calls.append((owner_id, tick_index, environment))
        return f"{owner_id} spoke" if owner_id != "smith" else None

    monkeypatch.setattr(npcbrain_cognition, "tick", fake_tick)
    env = build_context(time_phase=0.9)

    spoken = tick_all(conn, ["barker", "smith", "broker"], RecordingEmitter(), environment=env, tick_index=10)

    assert [(o, i) for o, i, _ in calls] == [("barker", 10), ("smith", 11), ("broker", 12)]
    assert all(e is env for _, _, e in calls)
    assert spoken == {"barker": "barker spoke", "broker": "broker spoke"}


def test_tick_all_runs_decay_at_staggered_indices(conn):
    insert_short(conn, "fixer", entity_seen="drone", timestamp=NOW - 200_000)
    upsert_mid(conn, "fixer", "drone", delta=0.5, now=NOW - 700_000)

    # indices 1 and 2: neither cadence fires
    tick_all(conn, ["barker", "smith"], None, tick_index=1, now=NOW)
    assert len(get_short(conn, "fixer")) == 1
    assert get_mid(conn, "fixer")[0].correlation_weight == pytest.approx(0.5)

    # indices 4 and 5: the second owner lands on 5
    tick_all(conn, ["barker", "smith"], None, tick_index=4, now=NOW)
    assert len(get_short(conn, "fixer")) == 1
    assert get_mid(conn, "fixer")[0].correlation_weight == pytest.approx(0.475)

    # indices 1, 2 and 3: the third owner lands on 3
    tick_all(conn, ["barker", "smith", "broker"], None, tick_index=1, now=NOW)
    assert get_short(conn, "fixer") == []


def test_tick_records_speech_in_its_scene(conn, fixed_rng):
    insert_short(conn, "barker", phrase_heard="rusty pipe", scene_id="alley", timestamp=NOW)
    alley = build_context(scene_id="alley")

    text = tick(conn, "barker", RecordingEmitter(), environment=alley, tick_index=1, rng=fixed_rng(0.0), now=NOW)

    assert text == "Carefully, rusty pipe."
    heard = [h.phrase for h in get_phrases_from_others(conn, "smith", scene_id="alley")]
    assert text in heard
    assert get_phrases_from_others(conn, "smith", scene_id="bazaar") == []


def test_spoken_phrases_become_social_signal(conn, fixed_rng):
    insert_short(conn, "smith", phrase_heard="wares", timestamp=NOW)
    tick(conn, "barker", RecordingEmitter(), tick_index=1, rng=fixed_rng(0.0), now=NOW)

    response = assemble_response(conn, "smith", rng=fixed_rng(0.99), now=NOW)
    assert response.social_overlap == pytest.approx(1.0)


def test_print_emitter_writes_owner_and_text(capsys):
    PrintEmitter().publish("barker", "Carefully, wares trade.")
    assert capsys.readouterr().out == "[barker] Carefully, wares trade.\n"
