"""User Service: eventos UserInfoChanged a partir de perfiles de GitHub."""
