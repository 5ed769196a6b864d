"""Action handlers called from :class:`promptshare.app.PromptShareApp` wrappers."""
