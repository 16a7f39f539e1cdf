EMA_SHORT = 20
EMA_LONG = 50

RSI_PERIOD = 14
RSI_OVERSOLD = 30.0
RSI_OVERBOUGHT = 70.0
RSI_MIDLINE = 50.0

MACD_FAST = 12
MACD_SLOW = 26
MACD_SIGNAL = 9

STOCH_PERIOD = 14
STOCH_SIGNAL = 3
STOCH_OVERSOLD = 20.0
STOCH_OVERBOUGHT = 80.0

CCI_PERIOD = 20
CCI_CONSTANT = 0.015
CCI_OVERSOLD = -100.0
CCI_OVERBOUGHT = 100.0

WILLIAMS_PERIOD = 14
WILLIAMS_OVERSOLD = -80.0
WILLIAMS_OVERBOUGHT = -20.0

MFI_PERIOD = 14
ATR_PERIOD = 14
ADX_PERIOD = 14

BOLLINGER_PERIOD = 20
BOLLINGER_STD = 2.0

ROC_PERIOD = 20

MA_SUMMARY_PERIODS = (10, 20, 50, 100, 200)
CROSS_FAST = 50
CROSS_SLOW = 200

FIBONACCI_LEVELS = (0.382, 0.618, 1.0)
CAMARILLA_FACTOR = 1.1
CAMARILLA_DIVISORS = (12.0, 6.0, 4.0)

SCORE_STRONG = 4
SCORE_MILD = 2

GRAHAM_PE_MAX = 15.0
GRAHAM_PB_MAX = 1.5
GRAHAM_NUMBER_MAX = 22.5
GRAHAM_CURRENT_RATIO_MIN = 2.0
GRAHAM_DEBT_TO_EQUITY_MAX = 0.5

STATEMENT_PERIODS = 3
BATCH_MAX_WORKERS = 4
