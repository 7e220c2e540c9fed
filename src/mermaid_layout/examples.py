"""Sample diagram sources, one per supported family."""

FLOWCHART = """\
graph TD
    A[Start] --> B{Is it working?}
    B -->|Yes| C[Great!]
    B -->|No| D[Debug]
    D --> B
    C --> E[End]
"""

SEQUENCE = """\
sequenceDiagram
    participant Alice
    participant Bob
    Alice->>Bob: Hello Bob, how are you?
    Bob-->>Alice: Great!
    Alice-)Bob: See you later!
"""

PIE = """\
pie title Pets adopted by volunteers
    "Dogs" : 386
    "Cats" : 85
    "Rats" : 15
"""

CLASS = """\
classDiagram
    Animal <|-- Duck
    Animal <|-- Fish
    Animal <|-- Zebra
    Animal : +int age
    Animal : +String gender
    Animal: +isMammal()
    Animal: +mate()
    class Duck{
        +String beakColor
        +swim()
        +quack()
    }
    class Fish{
        -int sizeInFeet
        -canEat()
    }
    class Zebra{
        +bool is_wild
        +run()
    }
"""

STATE = """\
stateDiagram-v2
    [*] --> Still
    Still --> [*]
    Still --> Moving
    Moving --> Still
    Moving --> Crash
    Crash --> [*]
"""

TIMELINE = """\
timeline
    title History of Social Media Platform

    2002 : LinkedIn
    2004 : Facebook
         : Google
    2005 : Youtube
    2006 : Twitter
    2007 : FourSquare
    2008 : Github
    2010 : Instagram
    2011 : Snapchat
    2012 : Discord
"""

ALL = {
    "flowchart": FLOWCHART,
    "sequence": SEQUENCE,
    "pie": PIE,
    "class": CLASS,
    "state": STATE,
    "timeline": TIMELINE,
}
