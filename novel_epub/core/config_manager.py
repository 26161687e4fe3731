import configparser
import os
from typing import Optional

from novel_epub.utils.logger import get_logger, WORKSPACE_PATH

DEFAULT_CONFIG_PATH = os.path.join(WORKSPACE_PATH, 'config', 'settings.ini')

DEFAULT_OUTPUT_DIR = '.'
DEFAULT_AUTHOR = 'WuxiaWorld'
DEFAULT_TIMEOUT = 30.0
DEFAULT_USER_AGENT = (
    'Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 '
    '(KHTML, like Gecko) Chrome/126.0.0.0 Safari/537.36'
)

logger = get_logger(__name__)


def _default_config() -> configparser.ConfigParser:
    config = configparser.ConfigParser(interpolation=None)
    config['General'] = {
        'output_dir': DEFAULT_OUTPUT_DIR,
        'author': DEFAULT_AUTHOR,
    }
    config['Fetch'] = {
        # Blank means one worker per CPU
        'max_workers': '',
        'timeout': str(DEFAULT_TIMEOUT),
        'user_agent': DEFAULT_USER_AGENT,
    }
    return config


class ConfigManager:
    def __init__(self, config_file_path=None):
        self.config_file_path = config_file_path or os.getenv('NOVEL_EPUB_CONFIG') or DEFAULT_CONFIG_PATH
        self.config = configparser.ConfigParser(interpolation=None)
        self._load_config()

    def _load_config(self):
        """Loads the configuration from the INI file, creating a default one if missing."""
        if not os.path.exists(self.config_file_path):
            logger.warning(f"Config file not found at {self.config_file_path}. Creating a default config.")
            self.config = _default_config()
            try:
                os.makedirs(os.path.dirname(os.path.abspath(self.config_file_path)), exist_ok=True)
                with open(self.config_file_path, 'w', encoding='utf-8') as configfile:
                    self.config.write(configfile)
                logger.info(f"Created a default config file at: {self.config_file_path}")
            except OSError as e:
                logger.error(f"Error creating default config file: {e}. Using hardcoded defaults.", exc_info=True)
            return

        self.config.read(self.config_file_path, encoding='utf-8')

        # Fill in sections an older or hand-written file may lack
        for section, options in _default_config().items():
            if section == configparser.DEFAULTSECT:
                continue
            if not self.config.has_section(section):
                self.config.add_section(section)
                logger.info(f"Added missing [{section}] section to the config.")
            for option, value in options.items():
                if not self.config.has_option(section, option):
                    self.config.set(section, option, value)

    def get_setting(self, section: str, option: str, fallback=None) -> Optional[str]:
        """Gets a specific setting from the configuration."""
        try:
            return self.config.get(section, option, fallback=fallback)
        except (configparser.NoSectionError, configparser.NoOptionError):
            return fallback

    def get_output_dir(self) -> str:
        """
        Returns the directory the EPUB is written to.
        Priority:
        1. NOVEL_EPUB_OUTPUT_DIR environment variable.
        2. Path from config file (settings.ini).
        3. The current working directory.
        """
        env_output_dir = os.getenv('NOVEL_EPUB_OUTPUT_DIR')
        if env_output_dir:
            logger.info(f"Using output directory from NOVEL_EPUB_OUTPUT_DIR: {env_output_dir}")
            return os.path.abspath(env_output_dir)
        path_from_config = self.get_setting('General', 'output_dir', fallback=DEFAULT_OUTPUT_DIR) or DEFAULT_OUTPUT_DIR
        return os.path.abspath(path_from_config)

    def get_author(self) -> str:
        author = self.get_setting('General', 'author', fallback=DEFAULT_AUTHOR)
        if not author or not author.strip():
            return DEFAULT_AUTHOR
        return author.strip()

    def get_max_workers(self) -> Optional[int]:
        """Returns the worker pool size, or None to use one worker per CPU."""
        raw_value = os.getenv('NOVEL_EPUB_MAX_WORKERS') or self.get_setting('Fetch', 'max_workers', fallback='')
        if not raw_value or not raw_value.strip():
            return None
        try:
            max_workers = int(raw_value)
        except ValueError:
            logger.warning(f"Invalid max_workers value '{raw_value}'. Using one worker per CPU.")
            return None
        if max_workers < 1:
            logger.warning(f"max_workers must be at least 1, got {max_workers}. Using one worker per CPU.")
            return None
        return max_workers

    def get_timeout(self) -> float:
        raw_value = self.get_setting('Fetch', 'timeout', fallback=str(DEFAULT_TIMEOUT))
        try:
            timeout = float(raw_value)
        except (TypeError, ValueError):
            logger.warning(f"Invalid timeout value '{raw_value}'. Using {DEFAULT_TIMEOUT}s.")
            return DEFAULT_TIMEOUT
        if timeout <= 0:
            logger.warning(f"Timeout must be positive, got {timeout}. Using {DEFAULT_TIMEOUT}s.")
            return DEFAULT_TIMEOUT
        return timeout

    def get_user_agent(self) -> str:
        user_agent = self.get_setting('Fetch', 'user_agent', fallback=DEFAULT_USER_AGENT)
        return user_agent.strip() if user_agent and user_agent.strip() else DEFAULT_USER_AGENT
