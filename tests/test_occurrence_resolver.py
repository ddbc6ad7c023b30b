from datetime import date, time, timedelta
from itertools import islice

import pytest

from pawpath.models.domain import (
    ALL_DATES,
    AppointmentDefinition,
    Delegation,
    DelegationStatus,
    DiagnosticKind,
    Weekday,
)
from pawpath.services.diagnostics import DiagnosticCollector
from pawpath.services.occurrences.resolver import (
    DateRange,
    cached_listing,
    list_occurrences,
    occurs_on,
    resolve_occurrence,
    validate_definition,
)

MARCH_2024 = DateRange(date(2024, 3, 1), date(2024, 3, 31))


def _definition(
    appointment_id: str = "A1",
    *,
    recurring: bool = True,
    weekdays=(Weekday.WEDNESDAY,),
    single_date=None,
    start=time(9, 0),
    end=time(9, 30),
    cancellations=(),
    delegations=(),
    canceled_entirely: bool = False,
) -> AppointmentDefinition:
    return AppointmentDefinition(
        id=appointment_id,
        recurring=recurring,
        start_time=start,
        end_time=end,
        weekdays=frozenset(weekdays) if recurring else frozenset(),
        single_date=single_date,
        cancellations=frozenset(cancellations),
        delegations=tuple(delegations),
        canceled_entirely=canceled_entirely,
    )


@pytest.fixture(autouse=True)
def clear_listing_cache():
    cached_listing.cache_clear()
    yield
    cached_listing.cache_clear()


def test_one_time_appointment_occurs_only_on_its_date():
    definition = _definition(recurring=False, single_date=date(2024, 3, 10))
    with_unrelated_cancel = _definition(
        recurring=False, single_date=date(2024, 3, 10), cancellations=[date(2024, 3, 11)]
    )

    for candidate in (definition, with_unrelated_cancel):
        matching = [day for day in MARCH_2024.days() if occurs_on(candidate, day)]
        assert matching == [date(2024, 3, 10)]


def test_wednesday_and_saturday_recur_twice_in_every_seven_day_window():
    definition = _definition(weekdays=(Weekday.WEDNESDAY, Weekday.SATURDAY))

    for offset in range(14):
        start = date(2024, 3, 1) + timedelta(days=offset)
        window = DateRange(start, start + timedelta(days=6))
        occurrences = list(list_occurrences([definition], window))

        assert len(occurrences) == 2
        assert {Weekday.of(item.date) for item in occurrences} == {Weekday.WEDNESDAY, Weekday.SATURDAY}


def test_cancellation_removes_exactly_one_occurrence():
    weekly = _definition()
    canceled = _definition(cancellations=[date(2024, 3, 13)])

    before = [item.date for item in list_occurrences([weekly], MARCH_2024)]
    after = [item.date for item in list_occurrences([canceled], MARCH_2024)]

    assert before == [date(2024, 3, 6), date(2024, 3, 13), date(2024, 3, 20), date(2024, 3, 27)]
    assert after == [date(2024, 3, 6), date(2024, 3, 20), date(2024, 3, 27)]


def test_accepted_delegation_only_changes_attribution():
    share = Delegation(
        covering_user_id="walker-2",
        status=DelegationStatus.ACCEPTED,
        share_dates=frozenset({date(2024, 3, 13)}),
        covering_percentage=40,
    )
    plain = list(list_occurrences([_definition()], MARCH_2024))
    shared = list(list_occurrences([_definition(delegations=[share])], MARCH_2024))

    assert len(shared) == len(plain)
    delegated = [item for item in shared if item.is_delegated]
    assert len(delegated) == 1
    assert delegated[0].date == date(2024, 3, 13)
    assert delegated[0].covering_user_id == "walker-2"
    assert delegated[0].covering_percentage == 40


def test_pending_and_declined_delegations_are_ignored():
    delegations = [
        Delegation("walker-2", DelegationStatus.PENDING, ALL_DATES, 50),
        Delegation("walker-3", DelegationStatus.DECLINED, ALL_DATES, 50),
    ]
    occurrence = resolve_occurrence(_definition(delegations=delegations), date(2024, 3, 13))

    assert occurrence is not None
    assert occurrence.is_delegated is False
    assert occurrence.covering_user_id is None


def test_delegation_for_all_dates_covers_every_occurrence():
    share = Delegation("walker-2", DelegationStatus.ACCEPTED, ALL_DATES, 100)
    occurrences = list(list_occurrences([_definition(delegations=[share])], MARCH_2024))

    assert occurrences
    assert all(item.is_delegated and item.covering_user_id == "walker-2" for item in occurrences)


def test_first_accepted_delegation_wins_overlap_and_is_reported():
    day = date(2024, 3, 13)
    delegations = [
        Delegation("walker-2", DelegationStatus.ACCEPTED, frozenset({day}), 30),
        Delegation("walker-3", DelegationStatus.ACCEPTED, ALL_DATES, 60),
    ]
    diagnostics = DiagnosticCollector()

    occurrence = resolve_occurrence(_definition(delegations=delegations), day, diagnostics)

    assert occurrence.covering_user_id == "walker-2"
    assert occurrence.covering_percentage == 30
    overlaps = diagnostics.of_kind(DiagnosticKind.DELEGATION_OVERLAP)
    assert len(overlaps) == 1
    assert overlaps[0].subject_id == "A1"
    assert overlaps[0].date == day


def test_cancellation_takes_precedence_over_share_date():
    day = date(2024, 3, 13)
    share = Delegation("walker-2", DelegationStatus.ACCEPTED, frozenset({day}), 30)
    definition = _definition(cancellations=[day], delegations=[share])

    assert occurs_on(definition, day) is False
    assert resolve_occurrence(definition, day) is None


def test_canceled_definition_never_occurs():
    definition = _definition(weekdays=tuple(Weekday), canceled_entirely=True)

    assert list(list_occurrences([definition], MARCH_2024)) == []


def test_listing_is_ordered_by_date_then_start_then_end():
    definitions = [
        _definition("late", weekdays=(Weekday.WEDNESDAY,), start=time(14, 0), end=time(15, 0)),
        _definition("long", weekdays=(Weekday.WEDNESDAY,), start=time(9, 0), end=time(10, 0)),
        _definition("short", weekdays=(Weekday.WEDNESDAY,), start=time(9, 0), end=time(9, 30)),
        _definition("tuesday", weekdays=(Weekday.TUESDAY,), start=time(16, 0), end=time(16, 30)),
    ]
    week = DateRange(date(2024, 3, 10), date(2024, 3, 16))

    order = [item.appointment_id for item in list_occurrences(definitions, week)]

    assert order == ["tuesday", "short", "long", "late"]


def test_listing_is_restartable():
    definitions = [_definition("a"), _definition("b", weekdays=(Weekday.FRIDAY,))]
    listing = list_occurrences(definitions, MARCH_2024)

    assert list(listing) == list(listing)


def test_listing_is_lazy_over_long_ranges():
    decades = DateRange(date(2024, 1, 1), date(2124, 1, 1))
    listing = list_occurrences([_definition()], decades)

    first_three = [item.date for item in islice(listing, 3)]

    assert first_three == [date(2024, 1, 3), date(2024, 1, 10), date(2024, 1, 17)]


def test_malformed_definitions_are_skipped_and_reported():
    broken = _definition("broken", weekdays=())
    undated = _definition("undated", recurring=False, single_date=None)
    healthy = _definition("healthy")
    diagnostics = DiagnosticCollector()

    occurrences = list(list_occurrences([broken, undated, healthy], MARCH_2024, diagnostics))

    assert {item.appointment_id for item in occurrences} == {"healthy"}
    malformed = diagnostics.of_kind(DiagnosticKind.MALFORMED_DEFINITION)
    assert [item.subject_id for item in malformed] == ["broken", "undated"]


def test_overnight_appointment_is_valid_and_listed():
    overnight = _definition("overnight", start=time(22, 0), end=time(6, 0))

    assert validate_definition(overnight) is None
    occurrences = list(list_occurrences([overnight], DateRange.single(date(2024, 3, 13))))
    assert [(item.start_time, item.end_time) for item in occurrences] == [(time(22, 0), time(6, 0))]


def test_date_range_helpers():
    wednesday = date(2024, 3, 13)

    assert DateRange.week_of(wednesday) == DateRange(date(2024, 3, 10), date(2024, 3, 16))
    assert DateRange.week_of(wednesday, Weekday.MONDAY) == DateRange(date(2024, 3, 11), date(2024, 3, 17))
    assert DateRange.month_of(date(2024, 2, 20)) == DateRange(date(2024, 2, 1), date(2024, 2, 29))
    assert len(DateRange.single(wednesday)) == 1
    with pytest.raises(ValueError):
        DateRange(date(2024, 3, 2), date(2024, 3, 1))


def test_cached_listing_reuses_structurally_equal_inputs():
    first = cached_listing((_definition(),), MARCH_2024)
    second = cached_listing((_definition(),), MARCH_2024)

    assert first is second
    assert cached_listing.cache_info().hits == 1
    assert len(first[0]) == 4
