# Kanban board: audit findings partitioned into lanes by status
#
# Components:
#   schema.py - Data model (Card, Lane, FindingStatus), validation, priority badge
#   store.py  - Lock-protected card collection with optimistic update / reconcile
#   search.py - Case-insensitive substring filter
#   board.py  - Drag-and-drop engine: optimistic move, persist, confirm or roll back
