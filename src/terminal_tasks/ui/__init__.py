"""Interactive terminal UI: key interpretation, dialogs, controller and shell."""
