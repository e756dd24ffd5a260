"""Static name list served when the LLM is unavailable."""

FALLBACK_NAMES: list[tuple[str, str]] = [
    # Classic Biblical
    ("Luke", "Light-giving; Gospel author"),
    ("Matthew", "Gift of God; apostle"),
    ("James", "Supplanter; apostle"),
    ("Michael", "Who is like God; archangel"),
    ("Gabriel", "God is my strength; angel"),
    ("David", "Beloved; king of Israel"),
    ("Daniel", "God is my judge; prophet"),
    ("Nathan", "He gave; prophet"),
    ("Caleb", "Faithful, devoted"),
    ("Benjamin", "Son of the right hand"),
    ("Samuel", "Heard by God; prophet"),
    ("Andrew", "Strong; first apostle called"),
    ("Simon", "He has heard; apostle Peter"),
    ("Timothy", "Honoring God"),
    ("Stephen", "Crown; first martyr"),
    ("Noah", "Rest, comfort"),
    ("Joshua", "The Lord is salvation"),
    ("Aaron", "High mountain; priest"),
    ("Adam", "Man; first human"),
    ("Joseph", "He will add"),
    ("Peter", "Rock; leader of apostles"),
    ("Paul", "Small, humble; apostle"),
    ("John", "God is gracious; apostle"),
    ("Mark", "Warlike; Gospel author"),
    ("Philip", "Lover of horses; apostle"),
    ("Thomas", "Twin; doubting apostle"),
    # Short forms
    ("Jake", "Supplanter; from Jacob"),
    ("Sam", "Heard by God; from Samuel"),
    ("Max", "Greatest"),
    ("Jack", "God is gracious"),
    ("Cole", "Victory of the people"),
    ("Matt", "Gift of God"),
    ("Ben", "Son of the right hand"),
    ("Dan", "God is my judge"),
    ("Nick", "Victory of the people"),
    ("Tom", "Twin"),
    ("Joe", "He will add"),
    ("Tim", "Honoring God"),
    ("Steve", "Crown"),
    ("Pete", "Rock"),
    ("Andy", "Strong, manly"),
    ("Chris", "Bearer of Christ"),
    ("Nate", "Gift from God"),
    ("Zach", "God remembers"),
    # Modern classics
    ("Ryan", "Little king"),
    ("Kyle", "Narrow strait"),
    ("Sean", "God is gracious"),
    ("Brian", "Noble, strong"),
    ("Kevin", "Handsome, beloved"),
    ("Eric", "Eternal ruler"),
    ("Scott", "From Scotland"),
    ("Chad", "Warrior"),
    ("Brett", "From Brittany"),
    ("Grant", "Great, large"),
    ("Blake", "Dark, fair"),
    ("Chase", "Hunter"),
    ("Drew", "Strong, manly"),
    ("Troy", "Foot soldier"),
    ("Shane", "God is gracious"),
    ("Dean", "Valley"),
    ("Wade", "River crossing"),
    ("Reid", "Red-haired"),
    ("Jude", "Praised"),
    ("Finn", "Fair"),
    ("Owen", "Young warrior"),
    ("Leo", "Lion"),
    ("Ian", "God is gracious"),
    ("Seth", "Appointed"),
    ("Evan", "God is gracious"),
    ("Ethan", "Strong, firm"),
]
