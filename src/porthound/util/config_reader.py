# (c) Copyright IBM Corp. 2025

import yaml

from porthound.log import logger


class ConfigReader:
    def __init__(self, file_path: str) -> None:
        self.file_path = file_path
        self.data = {}
        if file_path:
            self.load_file()
        else:
            logger.warning("ConfigReader: No configuration file specified")

    def load_file(self) -> None:
        """Loads and parses the YAML file"""
        try:
            with open(self.file_path, "r", encoding="utf-8") as file:
                data = yaml.safe_load(file)
        except FileNotFoundError:
            logger.error(
                f"ConfigReader: Configuration file has not found: {self.file_path}"
            )
            return
        except yaml.YAMLError as e:
            logger.error(f"ConfigReader: Error parsing YAML file: {e}")
            return
        except UnicodeDecodeError as e:
            logger.error(f"ConfigReader: Configuration file is not UTF-8: {self.file_path}: {e}")
            return
        except OSError as e:
            logger.error(f"ConfigReader: Unable to read configuration file {self.file_path}: {e}")
            return

        if isinstance(data, dict):
            self.data = data
        elif data is not None:
            logger.error(
                f"ConfigReader: Expected a mapping at the top of {self.file_path}, got {type(data).__name__}"
            )
