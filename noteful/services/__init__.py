# Services package init
"""
Noteful Backend — Services Layer
==================================

What:  Cross-entity logic that no single repository owns.

Service Inventory:
    - ReferenceCoordinator: validates note → folder/tag references on write
      and clears them when a folder or tag is deleted
"""
