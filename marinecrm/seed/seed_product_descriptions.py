from typing import Optional
from sqlalchemy.orm import Session
from marinecrm.database import SessionLocal
from marinecrm.models.product_description import ProductDescription


# Default anti-heeling catalogue. Placeholders may be camelCase or snake_case.
PRODUCT_DESCRIPTIONS = [
    # Pumps
    ("ah_pump_rbp_250", "Reversible propeller pump RBP-250 (DN250) for anti-heeling service, capacity {{capacity}} m³/h "
                        "@ {{head}} mwc. Stainless-steel housing with Ni-Al bronze propeller, bi-directional flow. "
                        "Vertically coupled to {{enclosure}} electric motor ({{motorVariant}}) rated {{motorRating}} kW "
                        "at {{supplyVoltage}}, with thermistor and space heater. Mechanical seal with cofferdam and "
                        "leak sensor."),
    ("ah_pump_rbp_300", "Reversible propeller pump RBP-300, capacity {{capacity}} m³/h @ {{head}} mwc @ {{motorRating}} kW, "
                        "vertically coupled to {{enclosure}} electric motor ({{motorVariant}}) at {{supplyVoltage}}. "
                        "Stainless-steel pump housing with Ni-Al bronze propeller. Mechanical seal with oil-filled "
                        "cofferdam, leak detector, thermistor and space heater included."),
    ("ah_pump_rbp_400", "Reversible propeller pump RBP-400 (DN400) for high-capacity anti-heeling, delivering {{capacity}} "
                        "m³/h @ {{head}} mwc. Stainless-steel casing, Ni-Al bronze propeller and leak-safe mechanical "
                        "seal. Driven by {{enclosure}} electric motor ({{motorVariant}}) sized {{motorRating}} kW, with "
                        "thermistor and space heater."),

    # Motors
    ("ah_motor_non_ex", "Three-phase Non-Ex TEFC electric motor sized for the selected pump duty. Rated IP55, 380-690 V, "
                        "50/60 Hz. Includes embedded thermistors and space heater. Selected rating {{motorRating}} kW."),
    ("ah_motor_ex_proof", "Explosion-proof electric motor sized for the selected pump duty. Certified II 2 G Ex d IIC T4 "
                          "for hazardous areas. IP55, TEFC. Includes thermistors and space heater. Selected rating "
                          "{{motorRating}} kW."),

    # Starters
    ("ah_starter_dol", "Direct-On-Line starter panel for the electric motor, complete with contactors, overload relays, "
                       "ammeter, running-hour meter and emergency stop."),
    ("ah_starter_yd", "Star-Delta starter cabinet for reduced inrush current. Includes contactors, timer relay, "
                      "over-current protection and emergency stop."),
    ("ah_starter_soft", "Electronic soft-starter providing controlled ramp-up and ramp-down of motor speed. Panel includes "
                        "overload protection, bypass contactor and emergency stop."),
    ("ah_starter_vfd", "Variable Frequency Drive for full speed control of the pump motor (0-100 Hz). Includes filter and "
                       "braking resistor where required. Provides soft-start/stop and PID control inputs."),

    # Valves
    ("ah_valve_pne_single", "Pneumatic butterfly valve, single-acting, stainless-steel disc and EPDM seat. Complete with "
                            "solenoid valve, air filter/regulator and limit switches for open/closed indication"),
    ("ah_valve_pne_double", "Pneumatic butterfly valve, double-acting, sized to pipeline. Delivered with air dryer/filter "
                            "and limit switches for quick open/close action"),
    ("ah_valve_electric_single", "Electric-actuated butterfly valve, single-acting, IP67 actuator housing, manual override "
                                 "and built-in limit switches. Stainless-steel disc and EPDM seat"),
    ("ah_valve_electric_double", "Electric-actuated butterfly valve, double-acting (failsafe), with weatherproof actuator, "
                                 "local handwheel, limit switches and position indicator"),

    # Instrumentation & extras
    ("ah_level_switch", "High/low level switch for the heeling tanks: float sensor in stainless-steel tube with reed "
                        "contacts. Provides discrete signals to the MCU for automatic shut-off or alarm."),
    ("ah_local_switch_panel", "Local switch panel for starter: start/stop push buttons, reset and status lamps. Installed "
                              "near pump or starter cabinet."),
    ("ah_pressure_mon", "Pressure gauge and transmitter set for monitoring pump suction and discharge pressure. "
                        "Stainless-steel gauges and 4-20 mA transmitters with cable glands and test block."),
    ("ah_counter_flanges", "Set of counter flanges, bolts and nuts for connecting pump and valves to yard piping."),
    ("ah_spare_parts", "Recommended spare parts package for the anti-heeling pump(s), including mechanical seals, "
                       "gaskets, bearings and O-rings for one complete overhaul."),

    # Control systems
    ("ah_control_slave", "Secondary control desk with duplicate controls and display for the anti-heeling system. "
                         "Allows operation from a remote location on the vessel."),

    # Certification & services
    ("ah_class_cert", "Class certification by {{classSociety}}, including design review, witness tests and issuance of "
                      "certificates for pump, valves and control system. Power bracket {{classBracket}}."),
    ("ah_tools_manuals", "Tools, service manuals and class-required certificates for the complete anti-heeling system."),
    ("ah_commissioning", "Assistance at start-up and commissioning: {{supportPersonnel}}-man service engineer for "
                         "{{commissionDays}}-working days, supervising installation, functional testing, class witness "
                         "and crew training. Additional days on request."),
]


def seed_product_descriptions(db: Optional[Session] = None, reset: bool = False) -> int:
    """
    Insert the default description templates.

    Existing keys are left alone (they may have been edited by users)
    unless reset=True, which replaces the whole table.

    Returns:
        Number of rows inserted
    """
    own_session = db is None
    if own_session:
        db = SessionLocal()

    try:
        if reset:
            db.query(ProductDescription).delete()

        inserted = 0
        for key, template in PRODUCT_DESCRIPTIONS:
            if not db.query(ProductDescription).filter_by(key=key).first():
                db.add(ProductDescription(key=key, scope_template=template))
                inserted += 1

        db.commit()
        return inserted
    finally:
        if own_session:
            db.close()
