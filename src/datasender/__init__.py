"""DataSender package.

Organized by feature modules (auth, attendance, returns, delivery) with a thin
Flask controller layer over plain service classes.
"""
