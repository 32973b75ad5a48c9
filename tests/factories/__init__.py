"""Test factories for carechat."""
