"""Project approval workflow with multi-channel notifications and reminders."""
