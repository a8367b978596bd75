"""Tests for autonomi_transfer.workflows."""
