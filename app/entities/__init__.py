"""Domain entities persisted by the repositories."""
from .account import Role, User
from .catalog import Author, Book, Category
from .checkout import Address, Customer, Order, OrderItem
from .feedback import Comment, Rating
