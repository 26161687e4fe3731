import logging
import os
import unittest

from novel_epub.utils.logger import APP_LOGGER_NAME, LOGS_DIR, get_logger, main_log_file, setup_logger


class TestLogger(unittest.TestCase):

    def test_module_loggers_share_application_namespace(self):
        self.assertEqual(get_logger().name, APP_LOGGER_NAME)
        self.assertEqual(get_logger("novel_epub.core.orchestrator").name, "novel_epub.core.orchestrator")
        self.assertEqual(get_logger("tests.helper").name, "novel_epub.tests.helper")

    def test_log_file_creation_and_content(self):
        logger = get_logger("novel_epub.tests.logger")
        test_message = "This is a test log message from test_log_file_creation_and_content."
        logger.info(test_message)

        app_logger = logging.getLogger(APP_LOGGER_NAME)
        for handler in app_logger.handlers:
            handler.flush()

        self.assertEqual(os.path.dirname(main_log_file), LOGS_DIR)
        self.assertTrue(os.path.exists(main_log_file))
        with open(main_log_file, encoding='utf-8') as f:
            self.assertIn(test_message, f.read())

    def test_setup_logger_does_not_duplicate_handlers(self):
        log_file = os.path.join(LOGS_DIR, 'test_setup.log')
        setup_logger('novel_epub_test_setup', log_file, logging.DEBUG)
        logger = setup_logger('novel_epub_test_setup', log_file, logging.DEBUG, add_console_handler=True)

        self.assertEqual(len(logger.handlers), 2)
        self.assertFalse(logger.propagate)
        for handler in logger.handlers:
            handler.close()


if __name__ == '__main__':
    unittest.main()
