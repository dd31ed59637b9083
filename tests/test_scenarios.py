"""Worked turns covering each action path end to end."""

from coup_arena.bot import Move
from coup_arena.card import DECK_SIZE
from coup_arena.types import ActionType, Card


class TestScenarios:
    """Literal scenarios from the rulebook."""

    def test_income_unopposed(self, make_engine, scripted):
        """Taking one coin works and ignores the self target."""
        a = scripted(turn={"action": "taking-1", "against": "a"})
        engine = make_engine([("a", [Card.DUKE], 0), ("b", [Card.DUKE], 0)], {"a": a})
        engine.play_turn()

        player = engine.state.players["a"]
        assert player.coins == 1
        assert player.cards == [Card.DUKE]
        assert engine.state.players["b"].cards == [Card.DUKE]

    def test_assassination_unopposed(self, make_engine, scripted):
        """Assassin pays three and the target gives up the card it picks."""
        a = scripted(turn=Move(ActionType.ASSASSINATE, "b"))
        b = scripted(loss="captain")
        engine = make_engine(
            [("a", [Card.ASSASSIN], 4), ("b", [Card.DUKE, Card.CAPTAIN], 5)],
            {"a": a, "b": b},
        )
        engine.play_turn()

        assert engine.state.players["a"].coins == 1
        assert engine.state.players["b"].cards == [Card.DUKE]
        assert engine.state.players["b"].coins == 5
        assert engine.state.discard_pile == [Card.CAPTAIN]

    def test_tax_bluff_caught(self, make_engine, scripted):
        """A bluffed Duke loses the bluffer's only card and the coins."""
        a = scripted(turn=Move("taking-3"))
        b = scripted(challenge=True)
        engine = make_engine([("a", [Card.CAPTAIN], 0), ("b", [Card.DUKE], 0)], {"a": a, "b": b})
        engine.play_turn()

        player = engine.state.players["a"]
        assert player.cards == []
        assert player.coins == 0
        assert engine.state.players["b"].cards == [Card.DUKE]
        assert engine.state.is_game_over()

    def test_steal_blocked_by_true_captain(self, make_engine, scripted):
        """Challenging an honest counter costs the challenger and cancels the steal."""
        a = scripted(turn=Move(ActionType.STEAL, "b"), counter_challenge=True)
        b = scripted(counter="captain")
        engine = make_engine(
            [("a", [Card.CAPTAIN, Card.DUKE], 0), ("b", [Card.CAPTAIN, Card.CONTESSA], 3)],
            {"a": a, "b": b},
        )
        engine.play_turn()

        assert engine.state.players["a"].get_card_count() == 1
        assert engine.state.players["a"].coins == 0
        assert engine.state.players["b"].coins == 3
        assert engine.state.players["b"].get_card_count() == 2
        assert engine.state.card_total() == DECK_SIZE

    def test_foreign_aid_first_counter_wins(self, make_engine, scripted):
        """The first counter-claim ends the offers; a caught bluff lets the aid through."""
        a = scripted(turn=Move(ActionType.FOREIGN_AID), counter_challenge=True)
        b = scripted(counter=False)
        c = scripted(counter=Card.DUKE)
        d = scripted(counter=Card.DUKE)
        engine = make_engine(
            [
                ("a", [Card.CONTESSA, Card.CONTESSA], 0),
                ("b", [Card.ASSASSIN, Card.ASSASSIN], 0),
                ("c", [Card.CAPTAIN, Card.CAPTAIN], 0),
                ("d", [Card.AMBASSADOR, Card.AMBASSADOR], 0),
            ],
            {"a": a, "b": b, "c": c, "d": d},
        )
        engine.play_turn()

        assert b.calls["on_counter_action"] == 1
        assert c.calls["on_counter_action"] == 1
        assert d.calls["on_counter_action"] == 0
        assert engine.state.players["c"].get_card_count() == 1
        assert engine.state.players["a"].coins == 2

    def test_foreign_aid_blocked_by_unchallenged_duke(self, make_engine, scripted):
        """An unchallenged Duke stops foreign aid."""
        a = scripted(turn=Move(ActionType.FOREIGN_AID))
        b = scripted(counter="duke")
        engine = make_engine([("a", [Card.DUKE], 0), ("b", [Card.CAPTAIN], 0)], {"a": a, "b": b})
        engine.play_turn()

        assert engine.state.players["a"].coins == 0
        assert engine.state.history[-1]["type"] == "counter-action"

    def test_steal_takes_at_most_two(self, make_engine, scripted):
        """Stealing moves min(2, coins) from target to actor."""
        a = scripted(turn=Move(ActionType.STEAL, "b"))
        engine = make_engine([("a", [Card.CAPTAIN], 0), ("b", [Card.DUKE], 1)], {"a": a})
        engine.play_turn()

        assert engine.state.players["a"].coins == 1
        assert engine.state.players["b"].coins == 0

    def test_coup(self, make_engine, scripted):
        """Coup costs seven and takes a card from the target."""
        a = scripted(turn=Move(ActionType.COUP, "b"))
        engine = make_engine([("a", [Card.DUKE], 8), ("b", [Card.DUKE, Card.CONTESSA], 0)], {"a": a})
        engine.play_turn()

        assert engine.state.players["a"].coins == 1
        assert engine.state.players["b"].cards == [Card.CONTESSA]

    def test_exchange_keeps_chosen_cards(self, make_engine, scripted):
        """The ambassador keeps what it picks and returns the rest."""
        a = scripted(turn=Move(ActionType.EXCHANGE),
                     swap=lambda context: list(context.new_cards))
        engine = make_engine([("a", [Card.AMBASSADOR, Card.CONTESSA], 0), ("b", [Card.DUKE], 0)], {"a": a})
        deck_before = len(engine.state.deck)
        engine.play_turn()

        offered = a.contexts[-1].new_cards
        assert len(offered) == 2
        assert sorted(c.value for c in engine.state.players["a"].cards) == sorted(c.value for c in offered)
        assert len(engine.state.deck) == deck_before
        assert engine.state.card_total() == DECK_SIZE
