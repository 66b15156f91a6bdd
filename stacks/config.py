"""
Copyright (c) 2019, Brian Stafford
Copyright (c) 2019-2020, the Decred developers
See LICENSE for details

Configuration settings for building Stacks transactions. The configuration
file is JSON formatted.
"""

import logging
import os

from appdirs import AppDirs

from stacks import StacksError
from stacks.stx import nets
from stacks.stx.constants import AnchorMode, PostConditionMode
from stacks.util import helpers


# Set the data directory in a OS-appropriate location.
_ad = AppDirs("StacksTransactions", False)
DATA_DIR = _ad.user_data_dir

# The master configuration file name.
CONFIG_NAME = "stacks.conf"
CONFIG_PATH = os.path.join(DATA_DIR, CONFIG_NAME)

MAINNET = nets.mainnet.Name
TESTNET = nets.testnet.Name

log = helpers.getLogger("CONFIG")


def _levelFromName(name):
    lvl = logging.getLevelName(str(name).upper())
    if not isinstance(lvl, int):
        raise StacksError(f"unknown log level {name!r}")
    return lvl


class StacksConfig:
    """
    StacksConfig is configuration settings. Only settings present in the file
    override the defaults.
    """

    def __init__(self, path=None, netName=None):
        """
        Args:
            path (str): The settings file. Defaults to CONFIG_PATH.
            netName (str): Overrides the network named in the file.
        """
        self.path = path if path else CONFIG_PATH
        self.file = helpers.fetchSettingsFile(self.path)
        if netName:
            self.file["network"] = netName
        self.file.setdefault("network", MAINNET)
        self.netParams = nets.parse(self.file["network"])
        self.normalize()

    def set(self, k, v):
        """
        Set the configuration option. The configuration is not saved, so `save`
        should be called separately.

        Args:
            k (str): The setting key.
            v (JSON-encodable): The value.
        """
        self.file[k] = v

    def get(self, *keys):
        """
        Retrieve the setting at the provided key path. Multiple keys can be
        provided, with each successive key being retrieved from the previous
        key's value.

        Args:
            *keys (str): Recursive key list.

        Returns:
            mixed: The configuration value.
        """
        d = self.file
        rVal = None
        for k in keys:
            if not isinstance(d, dict) or k not in d:
                return None
            rVal = d[k]
            d = rVal
        return rVal

    def normalize(self):
        """
        Fill in defaults for missing settings.
        """
        file = self.file
        file.setdefault("chainId", self.netParams.ChainID)
        file.setdefault("postConditionMode", PostConditionMode.Deny.name)
        file.setdefault("anchorMode", None)
        file.setdefault("logLevel", "INFO")
        file.setdefault("logLevels", {})

    def transactionDefaults(self):
        """
        Keyword arguments for the transaction builders.

        Returns:
            dict: version, chainId, postConditionMode and anchorMode.
        """
        try:
            pcMode = PostConditionMode[self.file["postConditionMode"]]
            anchorName = self.file["anchorMode"]
            anchorMode = AnchorMode[anchorName] if anchorName else None
        except KeyError as e:
            raise StacksError(f"invalid configuration setting {e}")
        return dict(
            version=self.netParams.TxVersion,
            chainId=self.file["chainId"],
            postConditionMode=pcMode,
            anchorMode=anchorMode,
        )

    def prepareLogging(self, filepath=None):
        """
        Apply the configured log levels.

        Args:
            filepath (str): Optional rotating log file.
        """
        lvlMap = {k: _levelFromName(v) for k, v in self.file["logLevels"].items()}
        helpers.prepareLogging(filepath, _levelFromName(self.file["logLevel"]), lvlMap)

    def save(self):
        """
        Save the file.
        """
        helpers.saveJSON(self.path, self.file, indent=4, sort_keys=True)
        log.debug(f"configuration saved to {self.path}")


stacksConfig = None


def load(path=None):
    """
    Load and return the current configuration.

    The configuration is only loaded once. Successive calls to the modular `load`
    function will return the same instance.

    Returns:
        StacksConfig: The current configuration.
    """
    global stacksConfig
    if not stacksConfig:
        stacksConfig = StacksConfig(path)
    return stacksConfig
