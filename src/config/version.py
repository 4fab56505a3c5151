# src/config/version.py

APP_VERSION = "0.3.0"
APP_NAME = "Hashrate Heat Calculators"
REPORT_AUTHOR = "calc.exergyheat.com"
