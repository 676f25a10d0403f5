# Commands package holding the slash command cogs
