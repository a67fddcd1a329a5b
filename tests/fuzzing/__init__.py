"""Fuzz testing suite for the Sapphire reader."""

from .fuzz import Fuzzer, FuzzRunner, random_form, run_suite

__all__ = ["Fuzzer", "FuzzRunner", "random_form", "run_suite"]
