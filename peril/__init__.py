"""Game state, messages and AMQP publish/subscribe helpers for the Peril war game."""

__version__ = "0.1.0"