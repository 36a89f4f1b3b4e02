"""
Unit tests for core.config, core.ids and core.logging_setup.
"""
import json
import logging

import pytest

from event_disaggregation.core.config import (
    PRESETS,
    DisaggregationConfig,
    get_preset,
    list_presets,
    save_run_metadata,
)
from event_disaggregation.core.ids import IdCounter, RunIds
from event_disaggregation.core.logging_setup import RunLogger, setup_logging


class TestConfig:

    def test_defaults(self):
        config = DisaggregationConfig()
        assert config.background_offset == 30
        assert config.cleaning_threshold is None
        assert config.max_points_of_interest == 15
        assert config.acceptance_full_threshold == 5

    def test_get_preset(self):
        assert get_preset('fixed_cleaning').cleaning_threshold == 30
        assert get_preset('unbounded_pairing').time_limited_pairing is False

    def test_unknown_preset_lists_available(self):
        with pytest.raises(KeyError, match='default'):
            get_preset('nope')

    def test_list_presets(self):
        assert set(list_presets()) == set(PRESETS)

    def test_invalid_values(self):
        with pytest.raises(ValueError):
            DisaggregationConfig(threshold_estimator='maximum')
        with pytest.raises(ValueError):
            DisaggregationConfig(max_points_limit=0)

    def test_json_round_trip(self, tmp_path):
        config = get_preset('strict_tuning')
        path = tmp_path / 'config.json'
        config.to_json(str(path))
        assert DisaggregationConfig.from_json(str(path)) == config

    def test_from_dict_ignores_unknown_keys(self):
        config = DisaggregationConfig.from_dict({'switching_window': 7, 'color': 'blue'})
        assert config.switching_window == 7

    def test_with_cluster_size(self):
        config = DisaggregationConfig().with_cluster_size(10)
        assert config.max_points_of_interest == 10
        assert config.removal_max_points == 15

    def test_save_run_metadata(self, tmp_path):
        path = save_run_metadata(DisaggregationConfig(), str(tmp_path / 'out'), run_id='r1')
        with open(path) as f:
            metadata = json.load(f)
        assert metadata['run_id'] == 'r1'
        assert metadata['config']['name'] == 'default'


class TestIds:

    def test_counter(self):
        counter = IdCounter()
        assert [counter.next() for _ in range(3)] == [1, 2, 3]
        assert counter.last == 3

    def test_run_ids_are_independent(self):
        first, second = RunIds(), RunIds()
        first.events.next()
        first.events.next()
        assert second.events.next() == 1
        assert first.points.next() == 1


class TestRunLogger:

    def test_prefix(self, caplog):
        base = logging.getLogger('event_disaggregation.test_prefix')
        log = RunLogger(base, 'abc').for_event(7)
        with caplog.at_level(logging.INFO, logger=base.name):
            log.info("Found 10 points")
        assert "[run_abc/event_7] Found 10 points" in caplog.text

    def test_setup_logging_writes_run_file(self, tmp_path):
        logger = setup_logging('cfg1', str(tmp_path / 'logs'))
        try:
            assert logger.propagate is False
            assert len(logger.handlers) == 2
            logger.info("hello")
            for handler in logger.handlers:
                handler.flush()
            assert "hello" in (tmp_path / 'logs' / 'run_cfg1.log').read_text()
        finally:
            for handler in list(logger.handlers):
                handler.close()
                logger.removeHandler(handler)

    def test_setup_logging_is_idempotent(self):
        logger = setup_logging('cfg2')
        try:
            assert setup_logging('cfg2', level=logging.DEBUG) is logger
            assert len(logger.handlers) == 1
            assert logger.level == logging.DEBUG
        finally:
            for handler in list(logger.handlers):
                logger.removeHandler(handler)
