"""
Unit Tests - Logging
Tests for loguru sink configuration.
"""
import importlib

from loguru import logger

import allocation_engine.utils.logger as engine_logger
from allocation_engine.utils.logger import get_logger, reset_logging, setup_logging


class TestLogging:
    """Tests for engine logging setup."""
    
    def teardown_method(self):
        reset_logging()
    
    def test_bound_name_in_output(self, capsys):
        """Console records should carry the bound component name."""
        setup_logging(level="DEBUG", log_to_file=False)
        get_logger("allocation_engine.test").info("hello")
        assert "allocation_engine.test" in capsys.readouterr().out
    
    def test_unbound_records_use_module_name(self, capsys):
        """Records without a bound name should still format, under their module name."""
        setup_logging(level="DEBUG", log_to_file=False)
        logger.info("plain")
        out = capsys.readouterr().out
        assert __name__ in out
        assert "plain" in out
    
    def test_file_sinks(self, tmp_path):
        """File logging should write the run and error logs."""
        setup_logging(level="INFO", log_to_file=True, log_dir=str(tmp_path))
        get_logger("allocation_engine.test").error("broken")
        logger.complete()
        assert "broken" in (tmp_path / "allocation.log").read_text()
        assert "broken" in (tmp_path / "error.log").read_text()


class TestHostSinks:
    """Tests that engine logging leaves application handlers alone."""
    
    def teardown_method(self):
        reset_logging()
    
    def test_import_keeps_existing_sink(self):
        """Re-importing the logger module should not drop a sink added beforehand."""
        messages = []
        sink_id = logger.add(messages.append, format="{message}")
        try:
            importlib.reload(engine_logger)
            get_logger("allocation_engine.test").info("after import")
        finally:
            logger.remove(sink_id)
    
        assert any("after import" in m for m in messages)
    
    def test_setup_keeps_existing_sink(self):
        """setup_logging and reset_logging should only remove the engine's own sinks."""
        messages = []
        sink_id = logger.add(messages.append, format="{message}")
        try:
            setup_logging(level="INFO", log_to_file=False)
            get_logger("allocation_engine.test").info("after setup")
            reset_logging()
            get_logger("allocation_engine.test").info("after reset")
        finally:
            logger.remove(sink_id)
    
        assert any("after setup" in m for m in messages)
        assert any("after reset" in m for m in messages)
    
    def test_repeated_setup_does_not_duplicate(self, capsys):
        """Calling setup_logging twice should leave one console sink."""
        setup_logging(level="INFO", log_to_file=False)
        setup_logging(level="INFO", log_to_file=False)
        get_logger("allocation_engine.test").info("once")
        assert capsys.readouterr().out.count("once") == 1
