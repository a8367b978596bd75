"""Tests for autonomi_transfer.cli."""
