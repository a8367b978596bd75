"""
Storage module tests for autonomi-transfer.

Tests cover:
- Address and metadata types (test_types.py)
- Archive path rules and network form (test_archive.py)
- ArchiveBuilder fluent API (test_archive_builder.py)
- ContentStore primitives (test_content_store.py)
- AutonomiNetworkClient calls and error classification (test_network_client.py)
- Wallet keys and payment options (test_wallet.py)
"""
