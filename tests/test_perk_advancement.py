"""Tests for the perk training workflow."""

from __future__ import annotations

import logging
from pathlib import Path
import sys
import threading

import pytest

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from crewtrain.roster.models import Perk, Person, RosterSnapshot, RosterStatus, Specialty
from crewtrain.training.advancement import AdvancementOutcome, Trainer
from crewtrain.training.costs import ConfigurationError, CostTable, TrainingCost
from crewtrain.training.ledger import GameMode, LedgerBalance, ResourceLedger
from crewtrain.training.levels import SkillLevel


def _table() -> CostTable:
    return CostTable(
        entries=(
            TrainingCost(target_level=SkillLevel.BASIC, funds=50, science=5),
            TrainingCost(target_level=SkillLevel.INTERMEDIATE, funds=200, science=0),
            TrainingCost(target_level=SkillLevel.ADVANCED, funds=400, science=20),
            TrainingCost(target_level=SkillLevel.EXPERT, funds=800, science=40),
        )
    )


def _setup(
    *,
    status: RosterStatus = RosterStatus.AVAILABLE,
    level: SkillLevel = SkillLevel.BASIC,
    applicant: bool = False,
) -> tuple[Person, Perk, RosterSnapshot]:
    perk = Perk(specialty=Specialty.MECHANICAL, skill_level=level)
    person = Person(
        name="Bob",
        status=status,
        perks=[Perk(specialty=Specialty.ELECTRICAL), perk],
    )
    if applicant:
        roster = RosterSnapshot.build(applicants=[person])
    else:
        roster = RosterSnapshot.build(crew=[person])
    return person, perk, roster


def test_successful_advancement_spends_and_commits() -> None:
    person, perk, roster = _setup()
    ledger = ResourceLedger(funds=300, science=0)
    trainer = Trainer(_table(), roster=roster)

    result = trainer.advance(person, perk, GameMode.FULL_ECONOMY, ledger, in_flight=False)

    assert result.ok
    assert result.outcome is AdvancementOutcome.SUCCESS
    assert result.perk is not None
    assert result.perk.skill_level is SkillLevel.INTERMEDIATE
    assert ledger.balance() == LedgerBalance(funds=100.0, science=0.0)
    assert person.perk(Specialty.MECHANICAL).skill_level is SkillLevel.INTERMEDIATE
    # The other perk keeps its slot and level.
    assert [p.specialty for p in person.perks] == [Specialty.ELECTRICAL, Specialty.MECHANICAL]
    assert person.perks[0].skill_level is SkillLevel.NONE


def test_applicants_are_rejected_before_any_charge() -> None:
    person, perk, roster = _setup(applicant=True)
    ledger = ResourceLedger(funds=1_000_000, science=1_000)
    trainer = Trainer(_table(), roster=roster)

    result = trainer.advance(person, perk, GameMode.FULL_ECONOMY, ledger, in_flight=False)

    assert result.outcome is AdvancementOutcome.NOT_ELIGIBLE
    assert result.message == "Bob cannot be trained right now."
    assert not result.is_fatal
    assert ledger.balance() == LedgerBalance(funds=1_000_000.0, science=1_000.0)
    assert perk.skill_level is SkillLevel.BASIC


def test_assigned_crew_cannot_train_in_flight() -> None:
    person, perk, roster = _setup(status=RosterStatus.ASSIGNED)
    ledger = ResourceLedger(funds=1_000, science=100)
    trainer = Trainer(_table(), roster=roster)

    in_flight = trainer.advance(person, perk, GameMode.FULL_ECONOMY, ledger, in_flight=True)
    at_base = trainer.advance(person, perk, GameMode.FULL_ECONOMY, ledger, in_flight=False)

    assert in_flight.outcome is AdvancementOutcome.NOT_ELIGIBLE
    assert at_base.outcome is AdvancementOutcome.SUCCESS


def test_max_level_is_reported_without_charge() -> None:
    person, perk, roster = _setup(level=SkillLevel.EXPERT)
    ledger = ResourceLedger(funds=10_000, science=1_000)

    result = Trainer(_table(), roster=roster).advance(
        person, perk, GameMode.FULL_ECONOMY, ledger, in_flight=False
    )

    assert result.outcome is AdvancementOutcome.MAX_LEVEL_REACHED
    assert perk.skill_level is SkillLevel.EXPERT
    assert ledger.balance() == LedgerBalance(funds=10_000.0, science=1_000.0)


def test_insufficient_resources_leave_everything_unchanged() -> None:
    person, perk, roster = _setup(level=SkillLevel.INTERMEDIATE)
    before = person.to_dict()
    ledger = ResourceLedger(funds=1_000, science=19)

    result = Trainer(_table(), roster=roster).advance(
        person, perk, GameMode.FULL_ECONOMY, ledger, in_flight=False
    )

    assert result.outcome is AdvancementOutcome.INSUFFICIENT_RESOURCES
    assert result.message == "You cannot afford this training!"
    assert result.perk is None
    assert person.to_dict() == before
    assert ledger.balance() == LedgerBalance(funds=1_000.0, science=19.0)


def test_missing_cost_entry_is_a_fatal_result(caplog: pytest.LogCaptureFixture) -> None:
    person, perk, roster = _setup()
    table = CostTable(entries=(TrainingCost(target_level=SkillLevel.BASIC, funds=1),))
    ledger = ResourceLedger(funds=500, science=500)

    with caplog.at_level(logging.ERROR, logger="crewtrain.training.advancement"):
        result = Trainer(table, roster=roster).advance(
            person, perk, GameMode.FULL_ECONOMY, ledger, in_flight=False
        )

    assert result.outcome is AdvancementOutcome.CONFIGURATION_ERROR
    assert result.is_fatal
    assert "intermediate" in result.message
    assert perk.skill_level is SkillLevel.BASIC
    assert ledger.balance() == LedgerBalance(funds=500.0, science=500.0)
    assert any("Cannot train Bob" in record.getMessage() for record in caplog.records)


def test_science_only_mode_accepts_host_tag() -> None:
    person, perk, roster = _setup(level=SkillLevel.ADVANCED)
    ledger = ResourceLedger(funds=0, science=45)

    result = Trainer(_table(), roster=roster).advance(
        person, perk, "SCIENCE_SANDBOX", ledger, in_flight=False
    )

    assert result.ok
    assert perk.skill_level is SkillLevel.EXPERT
    assert ledger.balance() == LedgerBalance(funds=0.0, science=5.0)


def test_roster_can_be_supplied_per_call() -> None:
    person, perk, roster = _setup(applicant=True)
    trainer = Trainer(_table())

    result = trainer.advance(
        person, perk, GameMode.UNCONSTRAINED, ResourceLedger(), in_flight=False, roster=roster
    )

    assert result.outcome is AdvancementOutcome.NOT_ELIGIBLE


def test_missing_roster_is_a_fatal_result(caplog: pytest.LogCaptureFixture) -> None:
    person, perk, _ = _setup()
    ledger = ResourceLedger(funds=1e9, science=1e9)

    with caplog.at_level(logging.ERROR, logger="crewtrain.training.advancement"):
        result = Trainer(_table()).advance(
            person, perk, GameMode.FULL_ECONOMY, ledger, in_flight=False
        )

    assert result.outcome is AdvancementOutcome.CONFIGURATION_ERROR
    assert result.is_fatal
    assert "roster snapshot" in result.message
    assert perk.skill_level is SkillLevel.BASIC
    assert ledger.balance() == LedgerBalance(funds=1e9, science=1e9)
    assert any("Cannot train Bob" in record.getMessage() for record in caplog.records)
    with pytest.raises(ConfigurationError, match="roster snapshot"):
        Trainer(_table()).quote(person, perk, in_flight=False)


def test_mode_named_by_economy_charges_the_ledger() -> None:
    person, perk, roster = _setup()
    trainer = Trainer(_table(), roster=roster)

    broke = trainer.advance(
        person, perk, "FullEconomy", ResourceLedger(funds=0, science=0), in_flight=False
    )
    assert broke.outcome is AdvancementOutcome.INSUFFICIENT_RESOURCES
    assert perk.skill_level is SkillLevel.BASIC

    ledger = ResourceLedger(funds=300, science=0)
    paid = trainer.advance(person, perk, "full-economy", ledger, in_flight=False)
    assert paid.ok
    assert ledger.balance() == LedgerBalance(funds=100.0, science=0.0)


def test_unknown_mode_is_a_fatal_result() -> None:
    person, perk, roster = _setup()
    ledger = ResourceLedger(funds=1_000, science=100)

    result = Trainer(_table(), roster=roster).advance(
        person, perk, "Hardcore", ledger, in_flight=False
    )

    assert result.outcome is AdvancementOutcome.CONFIGURATION_ERROR
    assert "unknown game mode" in result.message
    assert perk.skill_level is SkillLevel.BASIC
    assert ledger.balance() == LedgerBalance(funds=1_000.0, science=100.0)

def test_quote_previews_next_step() -> None:
    person, perk, roster = _setup()
    trainer = Trainer(_table(), roster=roster)

    quote = trainer.quote(person, perk, in_flight=False)

    assert quote.eligible
    assert quote.current_level is SkillLevel.BASIC
    assert quote.next_level is SkillLevel.INTERMEDIATE
    assert quote.cost is not None and quote.cost.funds == 200.0
    assert not quote.at_max_level
    assert perk.skill_level is SkillLevel.BASIC

    perk.skill_level = SkillLevel.EXPERT
    capped = trainer.quote(person, perk, in_flight=False)
    assert capped.at_max_level
    assert capped.cost is None


def test_history_records_each_request() -> None:
    person, perk, roster = _setup()
    ledger = ResourceLedger(funds=200, science=0)
    trainer = Trainer(_table(), roster=roster)

    trainer.advance(person, perk, GameMode.FULL_ECONOMY, ledger, in_flight=False)
    trainer.advance(person, perk, GameMode.FULL_ECONOMY, ledger, in_flight=False)

    assert [entry.outcome for entry in trainer.history] == [
        AdvancementOutcome.SUCCESS,
        AdvancementOutcome.INSUFFICIENT_RESOURCES,
    ]
    first, second = trainer.history
    assert first.from_level is SkillLevel.BASIC
    assert first.to_level is SkillLevel.INTERMEDIATE
    assert first.cost is not None and first.cost.funds == 200.0
    assert second.cost is None
    assert second.notes["shortfall"] == {"funds": 400.0, "science": 20.0}


def test_history_keeps_only_recent_entries() -> None:
    person, perk, roster = _setup(level=SkillLevel.EXPERT)
    trainer = Trainer(_table(), roster=roster, history_limit=3)

    for _ in range(5):
        trainer.advance(person, perk, GameMode.UNCONSTRAINED, ResourceLedger(), in_flight=False)

    assert len(trainer.history) == 3
    assert all(
        entry.outcome is AdvancementOutcome.MAX_LEVEL_REACHED for entry in trainer.history
    )
    with pytest.raises(ValueError):
        Trainer(_table(), history_limit=0)


def test_concurrent_requests_train_a_perk_once_per_payment() -> None:
    person, perk, roster = _setup(level=SkillLevel.NONE)
    # Covers the basic and intermediate steps only.
    ledger = ResourceLedger(funds=250, science=5)
    trainer = Trainer(_table(), roster=roster)
    start = threading.Barrier(6)

    def worker() -> None:
        start.wait()
        trainer.advance(person, perk, GameMode.FULL_ECONOMY, ledger, in_flight=False)

    threads = [threading.Thread(target=worker) for _ in range(6)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    successes = [entry for entry in trainer.history if entry.outcome is AdvancementOutcome.SUCCESS]
    assert len(successes) == 2
    assert perk.skill_level is SkillLevel.INTERMEDIATE
    assert ledger.balance() == LedgerBalance(funds=0.0, science=0.0)
