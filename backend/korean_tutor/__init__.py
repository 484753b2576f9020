"""Korean Tutor Chat - relay server and chat-session state for a Korean-language tutor."""

__version__ = "1.0.0"
