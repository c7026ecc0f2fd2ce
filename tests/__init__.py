"""Tests for mops_reports."""
