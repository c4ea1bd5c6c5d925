from compartment_markov.config.constants import (
    ARRIVAL_SPEED,
    CHANNEL_WIDTH_FRACTION,
    DEFAULT_POPULATION_A,
    DEFAULT_POPULATION_B,
    DESTINATION_INSET,
    FRAMES_PER_BATCH,
    HISTORY_CAPACITY,
    MAX_POPULATION,
    MAX_SPEED,
    SPAWN_INSET,
    TRANSITION_SPEED,
    TRIALS_PER_BATCH,
)


def test_default_populations_fit_under_max() -> None:
    assert 0 <= DEFAULT_POPULATION_A <= MAX_POPULATION
    assert 0 <= DEFAULT_POPULATION_B <= MAX_POPULATION


def test_max_population_allows_large_runs() -> None:
    assert isinstance(MAX_POPULATION, int) and MAX_POPULATION >= 1_000


def test_batch_constants_are_positive_ints() -> None:
    assert isinstance(FRAMES_PER_BATCH, int) and FRAMES_PER_BATCH > 0
    assert isinstance(TRIALS_PER_BATCH, int) and TRIALS_PER_BATCH > 0


def test_history_capacity() -> None:
    assert HISTORY_CAPACITY == 200


def test_transition_speed_completes_in_finite_frames() -> None:
    assert 0.0 < TRANSITION_SPEED <= 1.0


def test_arrival_speed_below_cap() -> None:
    # Arrival components are drawn from [-ARRIVAL_SPEED/2, ARRIVAL_SPEED/2].
    assert ARRIVAL_SPEED / 2 < MAX_SPEED


def test_destination_inset_not_smaller_than_spawn_inset() -> None:
    assert DESTINATION_INSET >= SPAWN_INSET


def test_channel_fraction_leaves_room_for_compartments() -> None:
    assert 0.0 < CHANNEL_WIDTH_FRACTION < 0.5
