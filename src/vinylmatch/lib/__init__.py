"""Domain-specific library modules.

Modules here import vinylmatch domain models and provide higher-level logic
(search result selection). Pure utilities live in ``vinylmatch.utils``
instead; they use only the shared enums from ``vinylmatch.models.enums``.

Consumers should import directly from submodules::

    from vinylmatch.lib.matching import select_search_result
"""
