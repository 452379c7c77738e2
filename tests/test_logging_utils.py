import logging
import unittest

from utils import logging_utils
from utils.logging_utils import build_logging_config, get_tagged_logger, mask_db_url


class _ListHandler(logging.Handler):
    def __init__(self):
        super().__init__()
        self.records = []

    def emit(self, record: logging.LogRecord) -> None:  # type: ignore[override]
        self.records.append(record)


class TestLoggingUtils(unittest.TestCase):
    def test_build_logging_config_routes_stdout_and_stderr(self):
        cfg = build_logging_config(level="DEBUG", job_name="weatherdash")
        self.assertEqual(set(cfg["handlers"]), {"stdout", "stderr"})
        self.assertEqual(cfg["filters"]["record_context"]["job_name"], "weatherdash")
        self.assertEqual(cfg["root"]["level"], "DEBUG")
        self.assertEqual(cfg["loggers"]["sqlalchemy.engine"]["level"], "WARNING")

    def test_context_filter_fills_missing_fields(self):
        record = logging.LogRecord("uvicorn.error", logging.INFO, __file__, 1, "started", None, None)
        logging_utils.RecordContextFilter(job_name="weatherdash").filter(record)
        self.assertEqual(record.job_name, "weatherdash")
        self.assertEqual(record.tag, "error")

    def test_tag_defaults_to_last_module_segment(self):
        logger = get_tagged_logger("weatherdash.favorites_store.sql")
        self.assertEqual(logger.extra["tag"], "sql")

    def test_get_tagged_logger_injects_tag(self):
        handler = _ListHandler()
        logger = get_tagged_logger("weatherdash.test_tagging", tag="favorites/sql")
        base_logger = logger.logger
        base_logger.setLevel(logging.DEBUG)
        base_logger.addHandler(handler)
        base_logger.propagate = False
        try:
            logger.info("saved favorite")
            self.assertEqual(handler.records[-1].tag, "favorites/sql")
        finally:
            base_logger.removeHandler(handler)

    def test_setup_logging_force_reapplies_config(self):
        root = logging.getLogger()
        orig_handlers = root.handlers[:]
        orig_level = root.level
        try:
            logging_utils.setup_logging(level="INFO", job_name="weatherdash", force=True)
            self.assertTrue(root.handlers)
            self.assertTrue(
                any(
                    any(f.__class__.__name__ == "RecordContextFilter" for f in h.filters)
                    for h in root.handlers
                )
            )
        finally:
            root.handlers = orig_handlers
            root.setLevel(orig_level)
            root.propagate = True
            logging_utils._CONFIGURED = False


class TestMaskDbUrl(unittest.TestCase):
    def test_masks_username_and_password(self):
        masked = mask_db_url("postgresql://user:secret@db:5432/weatherdash")
        self.assertEqual(masked, "postgresql://***:***@db:5432/weatherdash")

    def test_masks_redis_password_without_username(self):
        self.assertEqual(mask_db_url("redis://:secret@cache:6379/0"), "redis://:***@cache:6379/0")

    def test_leaves_sqlite_paths_alone(self):
        url = "sqlite:///tmp/favorites.db"
        self.assertEqual(mask_db_url(url), url)
        self.assertEqual(mask_db_url("sqlite://"), "sqlite://")

    def test_masks_sensitive_query_params_only(self):
        masked = mask_db_url("postgresql://db/weatherdash?password=abc&sslmode=require")
        self.assertEqual(masked, "postgresql://db/weatherdash?password=%2A%2A%2A&sslmode=require")

    def test_unparseable_input_returned_as_is(self):
        self.assertEqual(mask_db_url("not a url"), "not a url")


if __name__ == "__main__":
    unittest.main()
