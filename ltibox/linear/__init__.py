"""Linear systems

The code is structured in the following way:

    * Src: the system representations (state-space and transfer function), their conversion and interconnection

    * Utils: operand validation and the settings of the system algebra

"""
