"""
Package des sondes de service

Interrogation en lecture seule des gestionnaires de services :
- systemd et SysV init (Linux)
- Service Control Manager (Windows)
"""
