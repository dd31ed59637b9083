"""Tests for penalties, challenge rounds and counter-action rounds."""

from coup_arena.actions import ActionFactory
from coup_arena.bot import Move
from coup_arena.card import DECK_SIZE
from coup_arena.types import ActionType, Card, ChallengeOutcome


class TestPenaltyEngine:
    """Card loss and its fallbacks."""

    def test_bot_chooses_card(self, make_engine, scripted):
        """The penalised bot picks which card to give up."""
        a = scripted(loss=Card.CONTESSA)
        engine = make_engine([("a", [Card.DUKE, Card.CONTESSA], 0), ("b", [Card.DUKE], 0)], {"a": a})
        lost = engine.penalties.penalize("a", "testing")

        assert lost is Card.CONTESSA
        assert engine.state.players["a"].slots == [Card.DUKE, None]
        assert [e["type"] for e in engine.state.history] == ["penalty", "lost-card"]

    def test_crash_loses_first_slot(self, make_engine, scripted):
        """A crashing card-loss callback forfeits slot one."""
        a = scripted(loss=RuntimeError("boom"))
        engine = make_engine([("a", [Card.DUKE, Card.CONTESSA], 0), ("b", [Card.DUKE], 0)], {"a": a})
        lost = engine.penalties.penalize("a", "testing")

        assert lost is Card.DUKE
        assert engine.state.players["a"].cards == [Card.CONTESSA]
        assert engine.state.faults == 1

    def test_card_not_held_loses_first_slot(self, make_engine, scripted):
        """Naming a card you do not hold forfeits slot one."""
        a = scripted(loss="assassin")
        engine = make_engine([("a", [Card.DUKE, Card.CONTESSA], 0), ("b", [Card.DUKE], 0)], {"a": a})
        engine.penalties.penalize("a", "testing")

        history = engine.state.history
        assert engine.state.players["a"].cards == [Card.CONTESSA]
        assert [e["type"] for e in history] == ["penalty", "invalid-surrender", "lost-card"]
        assert history[1]["player"] == "a"
        assert "'assassin'" in history[1]["reason"]
        assert history[2]["lost"] == "duke"

    def test_first_slot_means_first_occupied(self, make_engine, scripted):
        """With slot one already empty, slot two goes."""
        a = scripted(loss="nonsense")
        engine = make_engine([("a", [Card.DUKE, Card.CONTESSA], 0), ("b", [Card.DUKE], 0)], {"a": a})
        engine.state.discard("a", 0)
        engine.penalties.penalize("a", "testing")

        assert engine.state.players["a"].is_eliminated

    def test_dead_player_loses_nothing(self, make_engine, scripted):
        """Penalising an eliminated player is a no-op."""
        engine = make_engine([("a", [Card.DUKE], 0), ("b", [Card.DUKE], 0)])
        engine.state.discard("a", 0)

        assert engine.penalties.penalize("a", "testing") is None
        assert engine.state.card_total() == DECK_SIZE


class TestChallengeResolver:
    """Challenge rounds."""

    def test_unchallenged(self, make_engine):
        """Nobody challenging leaves the claim standing."""
        engine = make_engine([("a", [Card.CAPTAIN], 0), ("b", [Card.DUKE], 0), ("c", [Card.DUKE], 0)])
        outcome = engine.challenges.run("a", Card.DUKE, ActionType.TAX, "a")

        assert outcome is ChallengeOutcome.UNCHALLENGED
        assert engine.state.history == []

    def test_first_yes_stops_round(self, make_engine, scripted):
        """Only one challenger is resolved; later ones are never asked."""
        bots = {name: scripted(challenge=True) for name in ("b", "c", "d")}
        engine = make_engine(
            [("a", [Card.CAPTAIN], 0), ("b", [Card.DUKE], 0), ("c", [Card.DUKE], 0), ("d", [Card.DUKE], 0)],
            bots,
        )
        outcome = engine.challenges.run("a", Card.DUKE, ActionType.TAX, "a")

        assert outcome is ChallengeOutcome.CLAIM_FAILED
        assert bots["b"].calls["on_challenge_action_round"] == 1
        assert bots["c"].calls["on_challenge_action_round"] == 0
        assert bots["d"].calls["on_challenge_action_round"] == 0

    def test_order_follows_seating(self, make_engine, scripted):
        """Challengers are asked in seating order, skipping the asserter."""
        order = []

        def record(name):
            return lambda context: order.append(name) or False

        bots = {name: scripted(challenge=record(name)) for name in ("a", "b", "c", "d")}
        engine = make_engine(
            [("a", [Card.DUKE], 0), ("b", [Card.CAPTAIN], 0), ("c", [Card.CONTESSA], 0), ("d", [Card.ASSASSIN], 0)],
            bots,
        )
        engine.challenges.run("c", Card.DUKE, ActionType.TAX, "c")

        assert order == ["a", "b", "d"]

    def test_dead_players_not_asked(self, make_engine, scripted):
        """Eliminated players get no challenge offer."""
        b = scripted(challenge=True)
        engine = make_engine([("a", [Card.DUKE], 0), ("b", [Card.DUKE], 0), ("c", [Card.DUKE], 0)], {"b": b})
        engine.state.discard("b", 0)
        engine.challenges.run("a", Card.DUKE, ActionType.TAX, "a")

        assert b.calls["on_challenge_action_round"] == 0

    def test_truthful_claim_swaps_revealed_card(self, make_engine, scripted):
        """A proven card goes back to the deck and a new one fills its slot."""
        b = scripted(challenge=True)
        engine = make_engine([("a", [Card.CONTESSA, Card.DUKE], 0), ("b", [Card.CAPTAIN, Card.CAPTAIN], 0)], {"b": b})
        deck_before = len(engine.state.deck)
        outcome = engine.challenges.run("a", Card.DUKE, ActionType.TAX, "a")

        player = engine.state.players["a"]
        assert outcome is ChallengeOutcome.CLAIM_UPHELD
        assert player.slots[0] is Card.CONTESSA
        assert player.slots[1] is not None
        assert player.get_card_count() == 2
        assert len(engine.state.deck) == deck_before
        assert engine.state.players["b"].get_card_count() == 1
        assert engine.state.history[-1] == {"type": "unsuccessful-challenge", "from": "a", "card": "duke"}
        assert engine.state.card_total() == DECK_SIZE

    def test_crashing_challenger_penalised_and_skipped(self, make_engine, scripted):
        """A crash costs the challenger a card and the next player is asked."""
        b = scripted(challenge=ValueError("oops"))
        c = scripted(challenge=True)
        engine = make_engine(
            [("a", [Card.CAPTAIN], 0), ("b", [Card.DUKE, Card.DUKE], 0), ("c", [Card.DUKE], 0)],
            {"b": b, "c": c},
        )
        outcome = engine.challenges.run("a", Card.DUKE, ActionType.TAX, "a")

        assert outcome is ChallengeOutcome.CLAIM_FAILED
        assert engine.state.players["b"].get_card_count() == 1
        assert c.calls["on_challenge_action_round"] == 1

    def test_challenge_context(self, make_engine, scripted):
        """Challengers see the action, actor and target."""
        b = scripted()
        engine = make_engine([("a", [Card.CAPTAIN], 0), ("b", [Card.DUKE], 2)], {"b": b})
        engine.challenges.run("a", Card.CAPTAIN, ActionType.STEAL, "a", "b")

        context = b.contexts[-1]
        assert context.action is ActionType.STEAL
        assert context.by_whom == "a"
        assert context.to_whom == "b"
        assert context.card is Card.CAPTAIN


class TestCounterActionResolver:
    """Counter-claims and their challenges."""

    def test_only_target_offered(self, make_engine, scripted):
        """Targeted actions only ask the target."""
        bots = {name: scripted() for name in ("b", "c")}
        engine = make_engine([("a", [Card.CAPTAIN], 0), ("b", [Card.DUKE], 2), ("c", [Card.DUKE], 2)], bots)
        blocked = engine.counters.run(ActionFactory.create_action(ActionType.STEAL), "a", "b")

        assert blocked is False
        assert bots["b"].calls["on_counter_action"] == 1
        assert bots["c"].calls["on_counter_action"] == 0

    def test_uncounterable_action_asks_nobody(self, make_engine, scripted):
        """Tax has no counter round."""
        b = scripted(counter="duke")
        engine = make_engine([("a", [Card.DUKE], 0), ("b", [Card.DUKE], 0)], {"b": b})

        assert engine.counters.run(ActionFactory.create_action(ActionType.TAX), "a") is False
        assert b.calls["on_counter_action"] == 0

    def test_claim_outside_whitelist_penalised_but_blocks(self, make_engine, scripted):
        """A wrong counter card costs the claimant yet still stops the action."""
        a = scripted(turn=Move(ActionType.STEAL, "b"))
        b = scripted(counter="contessa")
        engine = make_engine([("a", [Card.CAPTAIN], 0), ("b", [Card.CONTESSA, Card.DUKE], 2)], {"a": a, "b": b})
        engine.play_turn()

        assert engine.state.players["b"].get_card_count() == 1
        assert engine.state.players["b"].coins == 2
        assert engine.state.players["a"].coins == 0

    def test_lying_counter_lets_action_through(self, make_engine, scripted):
        """A counter caught bluffing does not block."""
        a = scripted(turn=Move(ActionType.ASSASSINATE, "b"), counter_challenge=True)
        b = scripted(counter="contessa")
        engine = make_engine(
            [("a", [Card.ASSASSIN], 3), ("b", [Card.DUKE, Card.CAPTAIN], 0)],
            {"a": a, "b": b},
        )
        engine.play_turn()

        assert engine.state.players["b"].is_eliminated
        assert engine.state.players["a"].coins == 0
        assert engine.state.card_total() == DECK_SIZE

    def test_crashing_counterer_penalised(self, make_engine, scripted):
        """A crash while countering costs a card and blocks nothing."""
        a = scripted(turn=Move(ActionType.STEAL, "b"))
        b = scripted(counter=RuntimeError("no"))
        engine = make_engine([("a", [Card.CAPTAIN], 0), ("b", [Card.DUKE, Card.DUKE], 2)], {"a": a, "b": b})
        engine.play_turn()

        assert engine.state.players["b"].get_card_count() == 1
        assert engine.state.players["a"].coins == 2

    def test_counter_round_excludes_counterer(self, make_engine, scripted):
        """The counterer is never asked to challenge its own claim."""
        a = scripted(turn=Move(ActionType.FOREIGN_AID))
        b = scripted(counter="duke", counter_challenge=True)
        c = scripted()
        engine = make_engine(
            [("a", [Card.CAPTAIN], 0), ("b", [Card.DUKE], 0), ("c", [Card.CAPTAIN], 0)],
            {"a": a, "b": b, "c": c},
        )
        engine.play_turn()

        assert b.calls["on_counter_action_round"] == 0
        assert a.calls["on_counter_action_round"] == 1
        assert c.calls["on_counter_action_round"] == 1
        assert c.contexts[-1].counterer == "b"
        assert c.contexts[-1].card is Card.DUKE
        assert engine.state.players["a"].coins == 0
