# govboard: audit-finding Kanban board and REST glue for the governance dashboard
#
# Components:
#   transcode.py - snake_case <-> camelCase key transcoder with override tables
#   api.py       - REST clients (audit findings, portfolio) returning {success, data, error}
#   notify.py    - Toast notification sink
#   config.py    - YAML + environment configuration
#   kanban/      - Card schema, store, search and the drag-and-drop board engine
#   server.py    - Flask JSON server exposing the board
