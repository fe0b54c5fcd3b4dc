"""Key namespaces, block codec and timing helper."""

import logging

import pytest

from model.block import decode_block, encode_block
from repository.namespaces import backup_field, category_from_backup_field, queue_key
from util.enums import DataTypes
from util.errors import MalformedPayloadError
from util.timing import timed


class TestNamespaces:
    def test_keys_follow_category_prefix(self):
        assert queue_key(DataTypes.TRANSACTIONS) == "TRANSACTIONS-queue"
        assert backup_field(DataTypes.LOGS) == "LOGS-backup"

    def test_backup_field_maps_back_to_category(self):
        for category in DataTypes:
            assert category_from_backup_field(backup_field(category)) is category

    @pytest.mark.parametrize("field", ["BLOCKS-queue", "backup", "NOPE-backup"])
    def test_foreign_fields_are_rejected(self, field):
        with pytest.raises(ValueError):
            category_from_backup_field(field)


class TestBlockCodec:
    def test_encoding_is_compact_json(self):
        assert encode_block({"id": 1, "tx": ["a"]}) == b'{"id":1,"tx":["a"]}'

    def test_missing_value_is_malformed(self):
        with pytest.raises(MalformedPayloadError) as info:
            decode_block(None, key="BLOCKS-queue")
        assert info.value.raw is None


class TestTimed:
    def test_logs_success(self, caplog):
        log = logging.getLogger("timing-test")
        with caplog.at_level(logging.INFO, logger="timing-test"):
            with timed(log, "queue.backup", category="BLOCKS"):
                pass

        assert len(caplog.records) == 1
        assert caplog.records[0].levelno == logging.INFO
        assert caplog.records[0].getMessage().startswith("queue.backup.done ms=")
        assert caplog.records[0].getMessage().endswith(" category=BLOCKS")

    def test_logs_failure_and_reraises(self, caplog):
        log = logging.getLogger("timing-test")
        with caplog.at_level(logging.INFO, logger="timing-test"):
            with pytest.raises(RuntimeError):
                with timed(log, "backup.restore"):
                    raise RuntimeError("boom")

        assert caplog.records[0].levelno == logging.WARNING
        assert caplog.records[0].getMessage().startswith("backup.restore.failed")
