"""
Cranbrook Transit System (BC Transit agency 27) static configuration.

Canonical stop sequences are listed in the order buses run them. Each stop is a
``(stop_id, role)`` pair:

- ``mandatory``: anchor stop every trip of the direction serves
- ``alternate``: branch stop, only some trips serve it
- ``duplicate``: stop also served elsewhere on the loop or by the other direction

Source feed: https://www.bctransit.com/data/gtfs/cranbrook.zip
"""

AGENCY_ID = "27"
AGENCY_COLOR = "34B233"  # green, from the corporate graphic standards
ROUTE_TYPE_BUS = 3

ROUTE_COLORS = {
    1: "0D4C85",
    2: "86C636",
    3: "F18021",
    4: "03A14D",
    5: "FECE0E",
    7: "27A8DD",
    14: "E91A8B",
    20: "AC419C",
}

ROUTE_TRIP_SPECS = [
    {
        "route_id": 1,
        "directions": [
            {
                "direction": "NORTH",
                "headsign": "Walmart",  # via Tamarack
                "stops": [
                    ("170545", "mandatory"),  # Southbound 12th Ave N at Baker St
                    ("170509", "mandatory"),  # Eastbound Kootenay St N at Victoria Ave N
                    ("170427", "duplicate"),  # Northbound 21st Ave N at Kootenay St N
                    ("170428", "duplicate"),  # Eastbound 12th St N at 21st Ave N
                    ("170429", "duplicate"),  # Southbound Tamarack Mall Access
                    ("170426", "duplicate"),
                    ("170424", "alternate"),
                    ("170416", "alternate"),
                    ("170538", "duplicate"),  # Eastbound 12th St N at mall access
                    ("170531", "duplicate"),  # Eastbound 12th St N at Kokanee Dr N
                    ("170409", "mandatory"),  # Westbound Cranbrook Mall Access Rd
                ],
            },
            {
                "direction": "SOUTH",
                "headsign": "Downtown",
                "stops": [
                    ("170409", "mandatory"),  # Westbound Cranbrook Mall Access Rd
                    ("170407", "mandatory"),  # Eastbound Willowbrook Dr at Kokanee
                    ("170410", "alternate"),  # Southbound Willowbrook Dr 1700 Block
                    ("170405", "alternate"),  # Northbound Kokanee at Kelowna Cres
                    ("170412", "alternate"),  # Southbound 30th at Mt Fisher Dr
                    ("170414", "duplicate"),  # Southbound Kootenay St N at 12th St N
                    ("170425", "alternate"),  # Northbound Victoria Ave N at 8th St N
                    ("170427", "duplicate"),  # Northbound 21st Ave N at Kootenay St N
                    ("170428", "duplicate"),  # Eastbound 12th St N at 21st Ave N
                    ("170530", "alternate"),  # Southbound Kokanee Dr N at 12th St N
                    ("170429", "duplicate"),  # Southbound Tamarack Mall Access
                    ("170426", "mandatory"),  # Southbound 21st Ave N at Kootenay St N
                    ("170508", "alternate"),  # Westbound Kootenay St N at Victoria Ave N
                    ("170545", "mandatory"),  # Southbound 12th Ave N at Baker St
                ],
            },
        ],
    },
    {
        "route_id": 2,
        "directions": [
            {
                "direction": "EAST",
                "headsign": "Highlands",
                "stops": [
                    ("170545", "mandatory"),  # Southbound 12th Ave N at Baker St
                    ("170524", "mandatory"),
                    ("170474", "mandatory"),  # Northbound 30th Ave S at 7th St S
                ],
            },
            {
                "direction": "WEST",
                "headsign": "Downtown",
                "stops": [
                    ("170474", "mandatory"),  # Northbound 30th Ave S at 7th St S
                    ("170464", "mandatory"),
                    ("170545", "mandatory"),  # Southbound 12th Ave N at Baker St
                ],
            },
        ],
    },
    {
        "route_id": 3,
        "directions": [
            {
                "direction": "EAST",
                "headsign": "Downtown",
                "stops": [
                    ("170510", "mandatory"),  # Eastbound 11th St S at Innes Ave S
                    ("170490", "mandatory"),
                    ("170545", "mandatory"),  # Southbound 12th Ave N at Baker St
                ],
            },
            {
                "direction": "WEST",
                "headsign": "3rd Ave",  # via Innes
                "stops": [
                    ("170545", "mandatory"),  # Southbound 12th Ave N at Baker St
                    ("170489", "mandatory"),
                    ("170510", "mandatory"),  # Eastbound 11th St S at Innes Ave S
                ],
            },
        ],
    },
    {
        "route_id": 4,
        "directions": [
            {
                "direction": "NORTH",
                "headsign": "Mission Pl",  # Slaterville
                "stops": [
                    ("170545", "mandatory"),  # Southbound 12th Ave N at Baker St
                    ("170502", "mandatory"),
                    ("570002", "mandatory"),  # Mission Place
                ],
            },
            {
                "direction": "SOUTH",
                "headsign": "Downtown",
                "stops": [
                    ("570002", "mandatory"),  # Mission Place
                    ("170501", "mandatory"),
                    ("170545", "mandatory"),  # Southbound 12th Ave N at Baker St
                ],
            },
        ],
    },
    {
        "route_id": 5,
        "directions": [
            {
                "direction": "EAST",
                "headsign": "College",
                "stops": [
                    ("170545", "mandatory"),  # Southbound 12th Ave N at Baker St
                    ("170443", "mandatory"),
                    ("170539", "alternate"),
                    ("170431", "mandatory"),  # Westbound College Way
                ],
            },
            {
                "direction": "WEST",
                "headsign": "Downtown",
                "stops": [
                    ("170431", "mandatory"),  # Westbound College Way
                    ("170445", "mandatory"),
                    ("170545", "mandatory"),  # Southbound 12th Ave N at Baker St
                ],
            },
        ],
    },
    {
        "route_id": 7,
        "directions": [
            {
                "direction": "NORTH",
                "headsign": "Downtown",  # 11th Ave
                "stops": [
                    ("170002", "mandatory"),  # Southbound 4th Ave S at Birch Dr
                    ("170479", "mandatory"),
                    ("170545", "mandatory"),  # Southbound 12th Ave N at Baker St
                ],
            },
            {
                "direction": "SOUTH",
                "headsign": "South",  # 7th Ave
                "stops": [
                    ("170545", "mandatory"),  # Southbound 12th Ave N at Baker St
                    ("170514", "mandatory"),
                    ("170002", "mandatory"),  # Southbound 4th Ave S at Birch Dr
                ],
            },
        ],
    },
    {
        "route_id": 14,
        "directions": [
            {
                "direction": "NORTH",
                "headsign": "Downtown",
                "stops": [
                    ("170460", "mandatory"),  # Westbound 20A St S at 14th Ave S
                    ("170537", "mandatory"),
                    ("170518", "alternate"),
                    ("170541", "alternate"),
                    ("170516", "mandatory"),
                    ("170545", "mandatory"),  # Southbound 12th Ave N at Baker St
                ],
            },
            {
                "direction": "SOUTH",
                "headsign": "South",
                "stops": [
                    ("170545", "mandatory"),  # Southbound 12th Ave N at Baker St
                    ("170461", "mandatory"),
                    ("170460", "mandatory"),  # Westbound 20A St S at 14th Ave S
                ],
            },
        ],
    },
    {
        "route_id": 20,
        "directions": [
            {
                "direction": "NORTH",
                "headsign": "Downtown",
                "stops": [
                    ("170002", "mandatory"),  # Southbound 4th at Birch Dr
                    ("170484", "mandatory"),
                    ("170545", "mandatory"),  # Southbound 12th Ave N at Baker St
                ],
            },
            {
                "direction": "SOUTH",
                "headsign": "South",
                "stops": [
                    ("170545", "mandatory"),  # Southbound 12th Ave N at Baker St
                    ("170485", "mandatory"),
                    ("170002", "mandatory"),  # Southbound 4th at Birch Dr
                ],
            },
        ],
    },
]
