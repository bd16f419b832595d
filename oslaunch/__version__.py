"""Version information for oslaunch"""

__version__ = "0.1.0"
