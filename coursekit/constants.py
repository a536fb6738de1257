"""Shared constants: colors, labels, dataset locations, chapter catalog."""

CYL_COLORS = {
    "4": "#2A9D8F",
    "6": "#E9C46A",
    "8": "#E63946",
}

AM_COLORS = {
    "automatic": "#264653",
    "manual": "#F4A261",
}

SPECIES_COLORS = {
    "setosa": "#7209B7",
    "versicolor": "#2A9D8F",
    "virginica": "#FB8500",
}

BMI_ORDER = ["Underweight", "Normal", "Overweight", "Obese"]

BMI_COLORS = {
    "Underweight": "#A8DADC",
    "Normal": "#457B9D",
    "Overweight": "#F4A261",
    "Obese": "#E63946",
}

CHIS_RACES = ["Latino", "Asian", "African American", "White"]

DIAMOND_CUTS = ["Fair", "Good", "Very Good", "Premium", "Ideal"]
DIAMOND_COLORS = ["D", "E", "F", "G", "H", "I", "J"]
DIAMOND_CLARITY = ["I1", "SI2", "SI1", "VS2", "VS1", "VVS2", "VVS1", "IF"]

# Tufte weather chart palette (record range, normal range, present year)
TUFTE_COLORS = {
    "record_range": "#E1DAAE",
    "normal_range": "#A99F8C",
    "present": "#4A2123",
    "record_high": "#E63946",
    "record_low": "#1D3557",
    "grid": "#FFFFFF",
    "background": "#FFFFF8",
}

MTCARS_LABELS = {
    "mpg": "Miles / (US) gallon",
    "cyl": "Number of cylinders",
    "cyl_f": "Cylinders",
    "disp": "Displacement (cu.in.)",
    "hp": "Gross horsepower",
    "drat": "Rear axle ratio",
    "wt": "Weight (1000 lbs)",
    "qsec": "1/4 mile time (s)",
    "vs": "Engine (0 = V-shaped, 1 = straight)",
    "am": "Transmission (0 = automatic, 1 = manual)",
    "am_f": "Transmission",
    "gear": "Number of forward gears",
    "carb": "Number of carburetors",
}

IRIS_FEATURES = ["sepal_length", "sepal_width", "petal_length", "petal_width"]

IRIS_LABELS = {
    "sepal_length": "Sepal Length (cm)",
    "sepal_width": "Sepal Width (cm)",
    "petal_length": "Petal Length (cm)",
    "petal_width": "Petal Width (cm)",
    "species": "Species",
}

SOIL_PARTS = ["Sand", "Silt", "Clay"]

MONTH_ABBR = ["Jan", "Feb", "Mar", "Apr", "May", "Jun",
              "Jul", "Aug", "Sep", "Oct", "Nov", "Dec"]

# Day-of-year of the first day of each month in a non-leap year
MONTH_STARTS = [1, 32, 60, 91, 121, 152, 182, 213, 244, 274, 305, 335]

# Missing-value code of the University of Dayton daily temperature archive
DAYTON_MISSING = -99

# 97.5% t quantile for 19 degrees of freedom, used by the classic Tufte chart
T_CRITICAL_TUFTE = 2.101

DATASET_URLS = {
    "diamonds": "https://raw.githubusercontent.com/tidyverse/ggplot2/main/data-raw/diamonds.csv",
    "atlanta_temps": (
        "https://d37djvu3ytnwxt.cloudfront.net/assets/courseware/v1/"
        "592f3be3e90d2bdfe6a69f62374a1250/asset-v1:GTx+ISYE6501x+3T2017+type@asset+block/temps.txt"
    ),
    "dayton_nyc": "http://academic.udayton.edu/kissock/http/Weather/gsod95-current/NYNEWYOR.txt",
}

OPEN_METEO_ARCHIVE_URL = "https://archive-api.open-meteo.com/v1/archive"

CITIES = {
    "NYC": (40.7128, -74.0060),
    "Atlanta": (33.7490, -84.3880),
    "Dallas": (32.7767, -96.7970),
    "Los Angeles": (34.0522, -118.2437),
}

COURSE_TITLES = {
    "viz": "Data Visualization with ggplot2",
    "func": "Writing Functions & Functional Programming",
    "multi": "Multivariate Probability Distributions",
    "tidy": "Reshaping Data",
}

# number -> (title, course key, page file)
CHAPTERS = {
    1: ("Bar Plots", "viz", "01_Bar_Plots.py"),
    2: ("Density Plots", "viz", "02_Density_Plots.py"),
    3: ("Box Plots", "viz", "03_Box_Plots.py"),
    4: ("Ternary Plots", "viz", "04_Ternary_Plots.py"),
    5: ("Network Plots", "viz", "05_Network_Plots.py"),
    6: ("Figure Internals", "viz", "06_Figure_Internals.py"),
    7: ("Mosaic Plots", "viz", "07_Mosaic_Plots.py"),
    8: ("Bag Plot Extension", "viz", "08_Bag_Plot_Extension.py"),
    9: ("Tufte Weather", "viz", "09_Tufte_Weather.py"),
    10: ("Tidy Reshaping", "tidy", "10_Tidy_Reshaping.py"),
    11: ("Writing Functions", "func", "11_Writing_Functions.py"),
    12: ("Functional Programming", "func", "12_Functional_Programming.py"),
    13: ("Robust Functions", "func", "13_Robust_Functions.py"),
    14: ("Multivariate Probability", "multi", "14_Multivariate_Probability.py"),
}
