"""
Cogs package for Namewarden.
Contains the event listener and the spam-filter configuration command.
Each module defines a cog class and a setup function to register it with the bot.
The cogs are loaded explicitly in main.py to avoid dynamic imports.
"""
