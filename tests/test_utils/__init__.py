"""Tests for autonomi_transfer.utils."""
